"""
Race-flavoured display names.

``generate_name`` is a pure function of (race, gender, rng): the same
generator state always yields the same name. Unknown races fall back to
the Human tables.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class NameTable:
    male: tuple[str, ...]
    female: tuple[str, ...]
    surnames: tuple[str, ...]


NAME_TABLES: dict[str, NameTable] = {
    "Human": NameTable(
        male=(
            "Alexander", "Benjamin", "Christopher", "Daniel", "Edward", "Frederick",
            "Gabriel", "Henry", "Isaac", "James", "Kenneth", "Lucas", "Michael",
            "Nathan", "Oliver", "Patrick", "Quintin", "Robert", "Samuel", "Thomas",
            "Victor", "William",
        ),
        female=(
            "Alice", "Beatrice", "Catherine", "Diana", "Elizabeth", "Fiona", "Grace",
            "Helena", "Isabella", "Julia", "Katherine", "Luna", "Margaret", "Natalie",
            "Olivia", "Penelope", "Quinn", "Rebecca", "Sophia", "Teresa", "Victoria",
            "Willow",
        ),
        surnames=(
            "Ashford", "Blackwood", "Clearwater", "Drakeheart", "Emberly", "Fairwind",
            "Goldsmith", "Hawthorne", "Ironforge", "Kingsley", "Lightbringer",
            "Moonwhisper", "Nightfall", "Oakenshield", "Proudhammer", "Quicksilver",
            "Ravenwood", "Stargazer", "Thornfield", "Valorheart", "Windchaser",
            "Wyvernbane",
        ),
    ),
    "Goblin": NameTable(
        male=(
            "Grax", "Zik", "Norg", "Krix", "Vex", "Grik", "Zorg", "Nix", "Brak",
            "Skrunk", "Grex", "Zap", "Grok", "Snix", "Wrex", "Gax", "Zek", "Nark",
            "Brix", "Skrex",
        ),
        female=(
            "Zixa", "Narga", "Vexia", "Grika", "Zorna", "Nixa", "Braka", "Skunka",
            "Grexa", "Zapa", "Groka", "Snixa", "Wrexa", "Gaxa", "Zeka", "Narka",
            "Brixa", "Skrexa", "Grixia", "Zorka",
        ),
        surnames=(
            "Boneshard", "Mudcrawler", "Stinkfist", "Ratbane", "Scrapjaw", "Ironteeth",
            "Backstab", "Poisontooth", "Sneakfoot", "Grimgrin", "Shadowlurk",
            "Cutthroat", "Slyeye", "Quickblade", "Rustclaw", "Darkwhisper",
            "Bloodfang", "Nosetweak", "Rageclaw", "Vileheart",
        ),
    ),
    "Spider": NameTable(
        male=(
            "Arachnis", "Venomweaver", "Silkspinner", "Webmaster", "Shadowfang",
            "Darkweaver", "Nightcrawler", "Poisonsting", "Deathspin", "Voidweaver",
            "Thornspider", "Grimsilk", "Paleweb", "Duskweaver", "Bloodspinner",
        ),
        female=(
            "Arachne", "Silkweave", "Webspinner", "Venomheart", "Shadowsilk",
            "Darkweb", "Nightweaver", "Poisonweave", "Blackspin", "Deathsilk",
            "Voidspinner", "Thornweave", "Grimweb", "Palesilk", "Duskspinner",
            "Bloodweave",
        ),
        surnames=(
            "of the Dark Web", "the Silken", "the Venomous", "the Spinner",
            "the Weaver", "the Crawler", "the Hunter", "the Patient", "the Deadly",
            "the Swift", "the Silent", "the Ancient", "the Wise", "the Feared",
            "the Shadowed", "the Eternal",
        ),
    ),
    "Demon": NameTable(
        male=(
            "Baal", "Asmodeus", "Malphas", "Azazel", "Belial", "Mammon", "Belphegor",
            "Leviathan", "Beelzebub", "Moloch", "Abaddon", "Samael", "Dagon",
            "Baphomet", "Astaroth", "Paimon", "Buer", "Valac", "Gusion",
        ),
        female=(
            "Lilith", "Jezebel", "Lamia", "Succubia", "Hecate", "Morrigan", "Banshee",
            "Fury", "Nemesis", "Discord", "Chaos", "Strife", "Wrath", "Malice",
            "Spite", "Venom", "Torment", "Anguish", "Despair", "Ruin",
        ),
        surnames=(
            "the Corruptor", "Soulrender", "Flamebringer", "Darkbane", "Hellborn",
            "Voidcaller", "Shadowlord", "Doomweaver", "Chaosborn", "Nightterror",
            "Deathwhisper", "Painbringer", "Soulburner", "Vilehart", "Grimfate",
            "Dreadlord", "Tormentor", "Destroyer", "Annihilator", "the Eternal",
        ),
    ),
    "Vampire": NameTable(
        male=(
            "Vlad", "Alucard", "Dracula", "Lestat", "Louis", "Armand", "Nicolas",
            "Marius", "Khayman", "Vittorio", "Santino", "Thorne", "Cyrus", "Gregory",
            "Antoine", "Raphael",
        ),
        female=(
            "Carmilla", "Lilith", "Selene", "Akasha", "Pandora", "Gabrielle",
            "Claudia", "Bianca", "Merrick", "Maharet", "Mekare", "Jesse", "Miriam",
            "Sarah", "Sonja", "Erika", "Amelia", "Antoinette", "Celeste",
        ),
        surnames=(
            "Dracul", "Bathory", "Nosferatu", "Tepes", "Corvinus", "Von Carstein",
            "Bloodthorne", "Nightshade", "Crimsonmoon", "Shadowheart", "Deathwhisper",
            "Eternus", "Immortalis", "Sanguinarius", "Nocturnalis", "Morteus",
            "Vampyrus", "Gothicus", "Darkmoore", "Ravencroft",
        ),
    ),
}

GENDERS = ("Male", "Female")


def random_gender(rng: np.random.Generator) -> str:
    return GENDERS[int(rng.integers(0, len(GENDERS)))]


def generate_name(
    race: str, gender: str | None, rng: np.random.Generator,
) -> str:
    """Return ``"<first> <surname>"`` drawn from the race's name tables."""
    table = NAME_TABLES.get(race, NAME_TABLES["Human"])
    if not gender:
        gender = random_gender(rng)

    pool = table.female if gender.lower() == "female" and table.female else table.male
    first = pool[int(rng.integers(0, len(pool)))]
    surname = table.surnames[int(rng.integers(0, len(table.surnames)))]
    return f"{first} {surname}"
