# -*- coding: utf-8 -*-
"""Default English copy for the tours, and a dictionary-backed translator."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .recipes import Translator

TUTORIAL_STRINGS_EN = {
    "tutorial.skip": "Skip",
    "tutorial.next": "Next",
    "tutorial.finish": "Finish",
    "tutorial.thankYou": "You're all set. Happy tracking!",
    "tutorial.tapToContinue": "Tap here to continue!",
    "tutorial.tapToScan": "Tap here to scan your first meal!",
    "tutorial.tapToProfile": "Tap here to see your profile!",
    "tutorial.tapToExit": "Tap here to go back",
    "tutorial.home.step1.title": "Daily calories",
    "tutorial.home.step1.content": "This card shows how many calories you have eaten today against your goal.",
    "tutorial.home.step2.title": "Macros",
    "tutorial.home.step2.content": "Protein, carbs and fat are tracked separately so you can balance your meals.",
    "tutorial.home.step3.title": "Your meals",
    "tutorial.home.step3.content": "Every meal you log shows up here. Tap one to edit it.",
    "tutorial.home.step4.title": "Scan food",
    "tutorial.home.step4.content": "Use the scanner to log a meal from a photo or a barcode.",
    "tutorial.scanner.step1.title": "Barcode scanning",
    "tutorial.scanner.step1.content": "Point the camera at a product barcode to look it up instantly.",
    "tutorial.scanner.step2.title": "Switch modes",
    "tutorial.scanner.step2.content": "Use this toggle to switch between barcode and photo mode.",
    "tutorial.scanner.step3.title": "Photo mode",
    "tutorial.scanner.step3.content": "Take a photo of your plate and we will estimate what is on it.",
    "tutorial.scanner.step4.content": "You can review and adjust the result before saving.",
    "tutorial.profile.step1.title": "Your progress",
    "tutorial.profile.step1.content": "Streaks and totals live here.",
    "tutorial.profile.step2.title": "Edit profile",
    "tutorial.profile.step2.content": "Update your details whenever they change.",
    "tutorial.profile.step3.title": "Goals & preferences",
    "tutorial.profile.step3.content": "Adjust your calorie goal and activity level.",
    "tutorial.profile.step4.title": "Dietary restrictions",
    "tutorial.profile.step4.content": "Tell us about allergies and diets so we can warn you.",
    "tutorial.profile.step5.title": "Display settings",
    "tutorial.profile.step5.content": "Choose your theme and home screen layout.",
}


def catalog_translator(catalog: Optional[Mapping[str, Any]] = None) -> Translator:
    """Look keys up in ``catalog``; a missing key yields ``None`` so the step is dropped."""
    strings = TUTORIAL_STRINGS_EN if catalog is None else catalog

    def translate(key: str) -> Any:
        return strings.get(key)

    return translate
