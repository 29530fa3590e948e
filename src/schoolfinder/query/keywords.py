"""
Static keyword and tag tables used for school detection and classification.

All entries are lower-case literals. Name matching is a case-insensitive
substring test client-side and a case-insensitive alternation server-side,
so entries must not contain regular-expression metacharacters
(`. ^ $ * + ? ( ) [ ] { } | \\`) or double quotes.
"""

from __future__ import annotations

# Terms meaning "primary / elementary school", grouped by language.
PRIMARY_SCHOOL_KEYWORDS: dict[str, tuple[str, ...]] = {
    "norwegian": ("grunn", "grunnskole", "barneskole", "barneskule", "folkeskole"),
    "danish": ("folkeskole", "grundskole", "friskole"),
    "swedish": ("grundskola", "lågstadieskola", "lågstadiet"),
    "finnish": ("peruskoulu", "alakoulu", "ala-aste"),
    "icelandic": ("grunnskóli",),
    "english": (
        "primary school",
        "elementary school",
        "junior school",
        "infant school",
        "primary",
        "elementary",
        "international school",
        "bilingual school",
    ),
    "german": ("grundschule", "volksschule", "primarschule"),
    "dutch": ("basisschool", "lagere school"),
    "french": ("école primaire", "ecole primaire", "école élémentaire", "ecole elementaire"),
    "spanish": ("escuela primaria", "escuela básica", "escuela basica"),
    "portuguese": ("escola primária", "escola primaria", "escola básica", "escola basica", "ensino fundamental"),
    "italian": ("scuola primaria", "scuola elementare"),
    "polish": ("szkoła podstawowa", "szkola podstawowa"),
    "czech": ("základní škola", "zakladni skola"),
    "slovak": ("základná škola",),
    "hungarian": ("általános iskola",),
    "romanian": ("școala primară", "scoala primara", "școala gimnazială", "scoala gimnaziala"),
    "croatian_serbian": ("osnovna škola", "osnovna skola", "основна школа"),
    "slovenian": ("osnovna šola",),
    "estonian": ("põhikool", "algkool"),
    "latvian": ("pamatskola", "sākumskola"),
    "lithuanian": ("pradinė mokykla", "pagrindinė mokykla"),
    "turkish": ("ilkokul", "ilkokulu", "ilköğretim"),
    "greek": ("δημοτικό σχολείο", "δημοτικό"),
    "russian": ("начальная школа",),
    "ukrainian": ("початкова школа",),
    "bulgarian": ("основно училище", "начално училище"),
    "japanese": ("小学校",),
    "chinese": ("小学", "小學"),
    "korean": ("초등학교",),
    "arabic": ("مدرسة ابتدائية", "ابتدائية"),
    "indonesian_malay": ("sekolah dasar", "sekolah rendah"),
    "vietnamese": ("trường tiểu học", "tiểu học"),
    "hindi": ("प्राथमिक विद्यालय",),
    "swahili": ("shule ya msingi",),
}


def _flatten(table: dict[str, tuple[str, ...]]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for terms in table.values():
        for term in terms:
            if term not in seen:
                seen.add(term)
                out.append(term)
    return tuple(out)


PRIMARY_KEYWORDS: tuple[str, ...] = _flatten(PRIMARY_SCHOOL_KEYWORDS)

# Names containing any of these denote secondary or tertiary education.
HIGHER_EDUCATION_KEYWORDS: tuple[str, ...] = (
    # English
    "secondary",
    "high school",
    "middle school",
    "senior school",
    "sixth form",
    "college",
    "university",
    "polytechnic",
    # Norwegian / Danish / Swedish
    "videregående",
    "ungdomsskole",
    "ungdomsskule",
    "efterskole",
    "gymnasieskola",
    "högskola",
    "høgskole",
    "universitet",
    # Finnish
    "lukio",
    "yläkoulu",
    "ammattikoulu",
    "yliopisto",
    # German
    "gymnasium",
    "realschule",
    "hauptschule",
    "gesamtschule",
    "oberschule",
    "berufsschule",
    "hochschule",
    "universität",
    # Dutch
    "middelbare school",
    "hogeschool",
    "universiteit",
    "lyceum",
    # French
    "collège",
    "lycée",
    "lycee",
    "université",
    # Spanish / Portuguese / Italian
    "instituto",
    "secundaria",
    "bachillerato",
    "universidad",
    "escola secundária",
    "ensino médio",
    "universidade",
    "scuola secondaria",
    "liceo",
    "università",
    # Polish / Czech / Slovak / Hungarian
    "liceum",
    "technikum",
    "uniwersytet",
    "střední škola",
    "gymnázium",
    "stredná škola",
    "gimnázium",
    "középiskola",
    "egyetem",
    # Turkish
    "lisesi",
    "ortaokul",
    "üniversite",
    # Russian / Ukrainian
    "средняя школа",
    "гимназия",
    "лицей",
    "университет",
    "колледж",
    "гімназія",
    "ліцей",
    # East Asian
    "中学校",
    "高等学校",
    "中学",
    "中學",
    "大学",
    "大學",
    "중학교",
    "고등학교",
    "대학교",
)

# Tags whose exact values are checked by the structured classification rules.
CLASSIFICATION_TAG_KEYS: tuple[str, ...] = (
    "operator",
    "operator:type",
    "ownership",
    "school:type",
    "school:ownership",
)

PUBLIC_TAG_VALUES: frozenset[str] = frozenset(
    {
        "public",
        "government",
        "governmental",
        "municipal",
        "municipality",
        "state",
        "council",
        "county",
        "national",
        "federal",
        "regional",
        "community",
        "local_authority",
        "public_school",
        "kommune",
        "kommunal",
    }
)

PRIVATE_TAG_VALUES: frozenset[str] = frozenset(
    {
        "private",
        "private_school",
        "private_non_profit",
        "private_for_profit",
        "non_profit",
        "nonprofit",
        "independent",
        "charter",
        "religious",
        "church",
        "catholic",
        "foundation",
    }
)

# Substring hints in name / operator / ownership, tested before public hints.
PRIVATE_NAME_HINTS: tuple[str, ...] = (
    "private",
    "independent",
    "montessori",
    "friskole",
    "waldorf",
    "steiner",
    "international",
    "bilingual",
    "boarding",
    "catholic",
    "christian",
    "adventist",
    "lutheran",
    "islamic",
    "jewish",
    "privatschule",
    "freie schule",
    "privée",
    "privee",
    "privada",
    "privado",
    "privata",
    "prywatna",
    "soukromá",
    "magán",
    "özel",
    "частная",
    "приватна",
    "私立",
)

PUBLIC_NAME_HINTS: tuple[str, ...] = (
    "public",
    "government",
    "state",
    "municipal",
    "community",
    "council",
    "kommune",
    "kommunale",
    "primary",
    "elementary",
    "grunnskole",
    "barneskole",
    "folkeskole",
    "grundskola",
    "grundschule",
    "städtische",
    "gemeinde",
    "publique",
    "pública",
    "publica",
    "pubblica",
    "statale",
    "państwowa",
    "devlet",
    "公立",
    "市立",
    "государственная",
    "муниципальная",
)

WEBSITE_KEYS: tuple[str, ...] = ("website", "contact:website", "url")

# Tags that may hold the name of the person leading the school.
CONTACT_PERSON_KEYS: tuple[str, ...] = (
    "headteacher",
    "head_teacher",
    "contact:headteacher",
    "principal",
    "contact:principal",
    "school:principal",
    "headmaster",
    "director",
    "school:director",
    "contact:director",
    "rektor",
    "contact:rektor",
    "rector",
    "directeur",
    "schulleiter",
    "schulleitung",
    "dyrektor",
    "reditel",
    "ředitel",
    "igazgató",
    "preside",
    "müdür",
    "contact:person",
    "contact:name",
)

EMAIL_KEYS: tuple[str, ...] = ("email", "contact:email", "operator:email", "school:email")

DESCRIPTION_KEYS: tuple[str, ...] = ("description", "description:en", "note", "note:en", "comment")

# Free-text words announcing the head of a school inside a description.
PRINCIPAL_KEYWORDS: tuple[str, ...] = (
    "principal",
    "headteacher",
    "head teacher",
    "headmaster",
    "headmistress",
    "rektor",
    "rector",
    "director",
    "directeur",
    "directrice",
    "direktor",
    "schulleiter",
    "schulleiterin",
    "dyrektor",
    "ředitel",
    "igazgató",
    "preside",
    "diretor",
    "diretora",
    "müdür",
    "директор",
    "校長",
    "校长",
    "교장",
)
