"""Keyword rules for the farming assistant chat.

Rules are checked top to bottom; the first matching rule answers.
"""

from typing import Callable, List, Tuple

Predicate = Callable[[str], bool]


def any_of(*words: str) -> Predicate:
    return lambda text: any(w in text for w in words)


def both(first: Predicate, second: Predicate) -> Predicate:
    return lambda text: first(text) and second(text)


DEFAULT_REPLY = (
    "I'm your farming assistant! I can help with: fertilizers, pest control, crop prices, "
    "planting seasons, soil health, irrigation, and government schemes. What would you like to know?"
)

FERTILIZER = any_of("fertilizer")

RULES: List[Tuple[Predicate, str]] = [
    (
        both(FERTILIZER, any_of("wheat", "gehun")),
        "For wheat: basal dose of 60 kg Urea + 50 kg DAP per acre, top dressing of 40 kg Urea "
        "after the first irrigation (21 days). NPK 12:32:16 gives good results; add zinc sulphate "
        "if the soil is deficient.",
    ),
    (
        both(FERTILIZER, any_of("rice", "dhan", "paddy")),
        "For rice/paddy: basal 50 kg DAP + 25 kg Urea per acre, 50 kg Urea at tillering (21 days), "
        "25 kg Urea at panicle initiation (45 days), and 15-20 kg potash for better grain filling.",
    ),
    (
        both(FERTILIZER, any_of("vegetable", "sabzi")),
        "For vegetables: 5-10 tons of compost per acre before planting, NPK 19:19:19 at 10 kg per acre "
        "every 15 days, and a micronutrient foliar spray for quality.",
    ),
    (
        both(FERTILIZER, any_of("cotton", "kapas")),
        "For cotton: basal 50 kg DAP + 25 kg MOP per acre, 50 kg Urea at 30-40 days, 19:19:19 spray "
        "at flowering, and boron for better boll formation.",
    ),
    (
        any_of("fertilizer", "khad"),
        "The right NPK ratio depends on crop and soil. Get the soil tested first. Which crop are you "
        "growing? Tell me for specific advice!",
    ),
    (
        both(any_of("pest"), any_of("organic")),
        "Organic pest control: weekly neem oil spray (5 ml/liter), garlic-chili spray, Bt for "
        "caterpillars, yellow sticky traps for whiteflies.",
    ),
    (
        any_of("pest", "insect", "keet"),
        "Common pest solutions: aphids - Dimethoate 30% EC @ 2 ml/liter; whitefly - Imidacloprid "
        "17.8% SL @ 0.5 ml/liter; bollworm - Chlorpyriphos @ 2.5 ml/liter. Always wear protective gear.",
    ),
    (
        any_of("price", "mandi", "bhav"),
        "Approximate MSP 2024-25: wheat ₹2,275/quintal, paddy ₹2,300/quintal, cotton ₹7,020/quintal, "
        "maize ₹2,090/quintal. Check your local mandi or the eNAM app for live prices.",
    ),
    (
        both(any_of("season"), any_of("rice")),
        "Rice seasons: Kharif June-July (harvest Oct-Nov), Rabi Nov-Dec in limited regions, "
        "summer Jan-Feb with irrigation.",
    ),
    (
        both(any_of("season"), any_of("wheat")),
        "Wheat is sown October-November and harvested March-April; it needs 4-5 irrigations.",
    ),
    (
        any_of("season", "plant", "sowing"),
        "Kharif (June-Oct): rice, cotton, soybean. Rabi (Oct-Mar): wheat, mustard, chickpea. "
        "Zaid (Mar-Jun): vegetables, watermelon, cucumber.",
    ),
    (
        both(any_of("soil"), any_of("improve", "health", "fertility")),
        "Improve soil health with compost and green manure, crop rotation, legume cover crops, "
        "reduced tillage, and a soil test every 2-3 years.",
    ),
    (
        any_of("water", "irrigation", "drip"),
        "Drip irrigation saves 30-50% water; mulching cuts evaporation; alternate wetting-drying "
        "saves 25% water in rice. Micro-irrigation subsidies cover 40-55%.",
    ),
    (
        any_of("scheme", "subsidy", "yojana", "government"),
        "Major schemes: PM-KISAN (₹6,000/year), Soil Health Card, Kisan Credit Card, PMFBY crop "
        "insurance, micro-irrigation subsidy. Visit pmkisan.gov.in or your nearest CSC center.",
    ),
    (
        any_of("weather", "rain", "forecast"),
        "For forecasts use IMD AgroMet, the Meghdoot app (7-day advisory) or Damini for lightning "
        "warnings. Check the weather before spraying.",
    ),
    (
        any_of("hello", "hi", "namaste", "hey"),
        "Namaste! I'm your farming assistant. Ask me about fertilizers, pests, crop prices, "
        "planting seasons, soil health, water management or government schemes.",
    ),
    (
        any_of("thank", "dhanyavaad", "shukriya"),
        "You're welcome! Happy farming!",
    ),
]


def reply(message: str) -> str:
    text = (message or "").lower()
    for matches, answer in RULES:
        if matches(text):
            return answer
    return DEFAULT_REPLY
