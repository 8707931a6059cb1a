# -*- coding: utf-8 -*-
"""Calo guided-tour engine."""

__version__ = "0.1.0"
