"""Secret word tables and random word selection."""

from __future__ import annotations

import random

from .models import Language

DEFAULT_LANGUAGE = Language.EN

CATEGORIES: dict[Language, dict[str, tuple[str, ...]]] = {
    Language.EN: {
        "animals": ("Lion", "Elephant", "Giraffe", "Penguin", "Dolphin", "Tiger", "Kangaroo", "Zebra", "Panda", "Koala"),
        "food": ("Pizza", "Burger", "Sushi", "Pasta", "Taco", "Ice Cream", "Pancake", "Waffle", "Steak", "Salad"),
        "jobs": ("Doctor", "Teacher", "Engineer", "Artist", "Chef", "Pilot", "Firefighter", "Police", "Lawyer", "Nurse"),
        "objects": ("Chair", "Table", "Laptop", "Phone", "Book", "Pen", "Car", "Bicycle", "Clock", "Lamp"),
    },
    Language.SQ: {
        "animals": (
            "Luani", "Elefanti", "Gjirafa", "Pinguini", "Delfini", "Tigri", "Kanguri", "Zebra", "Panda",
            "Koala", "Qeni", "Maca", "Zog", "Peshk", "Kali", "Lopa", "Dhi", "Derri", "Lepuri", "Mi",
            "Ari", "Ujku", "Dhelpra", "Dreri", "Mjalta",
        ),
        "food": (
            "Pica", "Burger", "Sushi", "Makarona", "Taco", "Akullore", "Pankek", "Waffle", "Biftek",
            "Sallatë", "Bukë", "Qumësht", "Djathë", "Vezë", "Mollë", "Banane", "Portokall", "Domate",
            "Qepë", "Patate", "Oriz", "Supë", "Tortë", "Biskota", "Çokollatë",
        ),
        "jobs": (
            "Doktor", "Mësues", "Inxhinier", "Artist", "Kuzhinier", "Pilot", "Zjarrfikës", "Polic",
            "Avokat", "Infermier", "Shkencëtar", "Shkrimtar", "Muzikant", "Këngëtar", "Valltar", "Aktor",
            "Gazetar", "Fotograf", "Arkitekt", "Kontabilist", "Menaxher", "Shofer", "Fermer", "Ndërtues",
            "Programues",
        ),
        "objects": (
            "Karrige", "Tavolinë", "Laptop", "Telefon", "Libër", "Stilolaps", "Makinë", "Biçikletë", "Orë",
            "Llampë", "Derë", "Dritare", "Krevat", "Sofë", "Pasqyrë", "Foto", "Çantë", "Kuti", "Çelës",
            "Kyç", "Kupë", "Pjatë", "Lugë", "Pirun", "Thikë",
        ),
    },
    Language.ES: {
        "animals": ("León", "Elefante", "Jirafa", "Pingüino", "Delfín", "Tigre", "Canguro", "Cebra", "Panda", "Koala"),
        "food": ("Pizza", "Hamburguesa", "Sushi", "Pasta", "Taco", "Helado", "Panqueque", "Waffle", "Bistec", "Ensalada"),
        "jobs": ("Doctor", "Maestro", "Ingeniero", "Artista", "Chef", "Piloto", "Bombero", "Policía", "Abogado", "Enfermero"),
        "objects": ("Silla", "Mesa", "Portátil", "Teléfono", "Libro", "Bolígrafo", "Coche", "Bicicleta", "Reloj", "Lámpara"),
    },
    Language.DE: {
        "animals": ("Löwe", "Elefant", "Giraffe", "Pinguin", "Delfin", "Tiger", "Känguru", "Zebra", "Panda", "Koala"),
        "food": ("Pizza", "Burger", "Sushi", "Pasta", "Taco", "Eis", "Pfannkuchen", "Waffel", "Steak", "Salat"),
        "jobs": (
            "Arzt", "Lehrer", "Ingenieur", "Künstler", "Koch", "Pilot", "Feuerwehrmann", "Polizist", "Anwalt",
            "Krankenpfleger",
        ),
        "objects": ("Stuhl", "Tisch", "Laptop", "Telefon", "Buch", "Stift", "Auto", "Fahrrad", "Uhr", "Lampe"),
    },
}


def categories_for(language: Language | str) -> dict[str, tuple[str, ...]]:
    """Return the category table for a language, falling back to English."""
    try:
        key = Language(language)
    except ValueError:
        key = DEFAULT_LANGUAGE
    return CATEGORIES.get(key, CATEGORIES[DEFAULT_LANGUAGE])


def get_random_word(language: Language | str, rng: random.Random | None = None) -> str:
    """Pick a category uniformly, then a word uniformly within it."""
    chooser = rng if rng is not None else random
    table = categories_for(language)
    category = chooser.choice(sorted(table))
    return chooser.choice(table[category])
