# src/normalize/countries.py — v1
"""Country standardization and numeric country codes.

Raw passport values arrive as English or Spanish country names, gentilic
forms (ARGENTINE, ESTADOUNIDENSE), ISO alpha-3 codes from the MRZ (ARG,
D for Germany) or formal state names. All of them collapse to a single
canonical Spanish name without accents (ESPAÑA keeps its Ñ), which then
keys the numeric code table.
"""

from __future__ import annotations

# Canonical name -> export code. The codes are an external contract with
# the downstream registry; ARGENTINA/ARMENIA sharing 1 and CHINA2 are part
# of that contract.
COUNTRY_CODE_MAP: dict[str, int] = {
    "ALEMANIA": 0,
    "ARGENTINA": 1,
    "ARMENIA": 1,
    "AUSTRALIA": 2,
    "AUSTRIA": 3,
    "BELGICA": 4,
    "BOLIVIA": 5,
    "BRASIL": 6,
    "BULGARIA": 7,
    "CANADA": 8,
    "CHILE": 9,
    "CHINA": 10,
    "COLOMBIA": 11,
    "CONGO": 12,
    "COREA DEMOCRATICA": 13,
    "COREA REPUBLICANA": 14,
    "COSTA RICA": 15,
    "CROACIA": 16,
    "CUBA": 17,
    "DINAMARCA": 18,
    "ECUADOR": 19,
    "EGIPTO": 20,
    "EL SALVADOR": 21,
    "ESLOVAQUIA": 22,
    "ESLOVENIA": 23,
    "ESPAÑA": 24,
    "ESTADOS UNIDOS": 25,
    "FILIPINAS": 26,
    "FINLANDIA": 27,
    "FRANCIA": 28,
    "GRECIA": 29,
    "GUATEMALA": 30,
    "GUYANA": 31,
    "HAITI": 32,
    "HONDURAS": 33,
    "CHINA2": 34,
    "HUNGRIA": 35,
    "INDIA": 36,
    "INDONESIA": 37,
    "IRLANDA": 38,
    "ISLANDIA": 39,
    "ISRAEL": 40,
    "ITALIA": 41,
    "JAMAICA": 42,
    "JAPON": 43,
    "JORDANIA": 44,
    "KENYA": 45,
    "LIBANO": 46,
    "LITUANIA": 47,
    "LUXEMBURGO": 48,
    "MALASIA": 49,
    "MARRUECOS": 50,
    "MEXICO": 51,
    "MONACO": 52,
    "NICARAGUA": 53,
    "NORUEGA": 54,
    "NUEVA ZELANDA": 55,
    "PAISES BAJOS": 56,
    "PANAMA": 57,
    "PARAGUAY": 58,
    "PERU": 59,
    "POLONIA": 60,
    "PORTUGAL": 61,
    "PUERTO RICO": 62,
    "INGLATERRA": 63,
    "REPUBLICA CHECA": 64,
    "REPUBLICA DOMINICANA": 65,
    "RUMANIA": 66,
    "RUSIA": 67,
    "SANTA SEDE": 68,
    "SENEGAL": 69,
    "SERBIA": 70,
    "SINGAPUR": 71,
    "SIRIA": 72,
    "SUDAFRICA": 73,
    "SUECIA": 74,
    "SUIZA": 75,
    "SURINAME": 76,
    "TAILANDIA": 77,
    "TAIWAN": 78,
    "TURQUIA": 79,
    "UCRANIA": 80,
    "URUGUAY": 81,
    "VENEZUELA": 82,
    "VIETNAM": 83,
}

# canonical -> every synonym that should map onto it (already uppercase)
_SYNONYMS: dict[str, tuple[str, ...]] = {
    "ALEMANIA": (
        "GERMANY", "DEUTSCHLAND", "DEU", "D", "GER", "GERMAN", "ALEMAN", "ALEMANA",
        "ALEMÁN", "FEDERAL REPUBLIC OF GERMANY", "BUNDESREPUBLIK DEUTSCHLAND",
        "REPUBLICA FEDERAL DE ALEMANIA", "DEUTSCH",
    ),
    "ARGENTINA": (
        "ARG", "ARGENTINE", "ARGENTINIAN", "ARGENTINO", "ARGENTINE REPUBLIC",
        "REPUBLICA ARGENTINA", "REPÚBLICA ARGENTINA",
    ),
    "ARMENIA": ("ARM", "ARMENIAN", "ARMENIO", "ARMENIA REPUBLIC"),
    "AUSTRALIA": (
        "AUS", "AUSTRALIAN", "AUSTRALIANO", "AUSTRALIANA",
        "COMMONWEALTH OF AUSTRALIA",
    ),
    "AUSTRIA": (
        "AUT", "AUSTRIAN", "AUSTRIACO", "AUSTRIACA", "ÖSTERREICH", "OSTERREICH",
        "REPUBLIC OF AUSTRIA",
    ),
    "BELGICA": (
        "BEL", "BELGIUM", "BÉLGICA", "BELGIAN", "BELGA", "BELGIQUE", "BELGIE",
        "KINGDOM OF BELGIUM",
    ),
    "BOLIVIA": (
        "BOL", "BOLIVIAN", "BOLIVIANO", "BOLIVIANA",
        "PLURINATIONAL STATE OF BOLIVIA", "ESTADO PLURINACIONAL DE BOLIVIA",
    ),
    "BRASIL": (
        "BRA", "BRAZIL", "BRAZILIAN", "BRASILEÑO", "BRASILEÑA", "BRASILENO",
        "BRASILEIRO", "BRASILEIRA", "FEDERATIVE REPUBLIC OF BRAZIL",
        "REPUBLICA FEDERATIVA DO BRASIL",
    ),
    "BULGARIA": ("BGR", "BULGARIAN", "BULGARO", "BÚLGARO", "REPUBLIC OF BULGARIA"),
    "CANADA": ("CAN", "CANADÁ", "CANADIAN", "CANADIENSE", "CANADIEN", "CANADIENNE"),
    "CHILE": ("CHL", "CHILEAN", "CHILENO", "CHILENA", "REPUBLIC OF CHILE", "REPUBLICA DE CHILE"),
    "CHINA": (
        "CHN", "CHINESE", "CHINO", "PEOPLE'S REPUBLIC OF CHINA",
        "PEOPLES REPUBLIC OF CHINA", "REPUBLICA POPULAR CHINA", "P.R. CHINA", "PRC",
    ),
    "COLOMBIA": (
        "COL", "COLOMBIAN", "COLOMBIANO", "COLOMBIANA", "REPUBLIC OF COLOMBIA",
        "REPUBLICA DE COLOMBIA",
    ),
    "CONGO": ("COG", "COD", "CONGOLESE", "CONGOLEÑO", "REPUBLIC OF THE CONGO"),
    "COREA DEMOCRATICA": (
        "PRK", "NORTH KOREA", "NORTH KOREAN", "COREA DEL NORTE", "NORCOREANO",
        "DEMOCRATIC PEOPLE'S REPUBLIC OF KOREA", "COREA DEMOCRÁTICA",
    ),
    "COREA REPUBLICANA": (
        "KOR", "SOUTH KOREA", "SOUTH KOREAN", "KOREA", "KOREAN", "COREA",
        "COREA DEL SUR", "SURCOREANO", "REPUBLIC OF KOREA",
    ),
    "COSTA RICA": ("CRI", "COSTA RICAN", "COSTARRICENSE"),
    "CROACIA": ("HRV", "CROATIA", "CROATIAN", "CROATA", "HRVATSKA", "REPUBLIC OF CROATIA"),
    "CUBA": ("CUB", "CUBAN", "CUBANO", "CUBANA", "REPUBLIC OF CUBA", "REPUBLICA DE CUBA"),
    "DINAMARCA": ("DNK", "DENMARK", "DANISH", "DANES", "DANÉS", "DANESA", "DANMARK"),
    "ECUADOR": ("ECU", "ECUADORIAN", "ECUATORIANO", "ECUATORIANA", "REPUBLICA DEL ECUADOR"),
    "EGIPTO": ("EGY", "EGYPT", "EGYPTIAN", "EGIPCIO", "EGIPCIA", "ARAB REPUBLIC OF EGYPT"),
    "EL SALVADOR": ("SLV", "SALVADORAN", "SALVADOREÑO", "SALVADOREÑA", "SALVADORENO"),
    "ESLOVAQUIA": ("SVK", "SLOVAKIA", "SLOVAK", "ESLOVACO", "ESLOVACA", "SLOVAK REPUBLIC"),
    "ESLOVENIA": ("SVN", "SLOVENIA", "SLOVENIAN", "SLOVENE", "ESLOVENO", "ESLOVENA"),
    "ESPAÑA": (
        "ESP", "SPAIN", "SPANISH", "ESPANA", "ESPAÑOL", "ESPAÑOLA", "ESPANOL",
        "ESPANOLA", "KINGDOM OF SPAIN", "REINO DE ESPAÑA", "REINO DE ESPANA",
    ),
    "ESTADOS UNIDOS": (
        "USA", "US", "U.S.A.", "U.S.", "UNITED STATES", "UNITED STATES OF AMERICA",
        "AMERICA", "AMERICAN", "ESTADOUNIDENSE", "NORTEAMERICANO", "NORTEAMERICANA",
        "ESTADOS UNIDOS DE AMERICA", "ESTADOS UNIDOS DE AMÉRICA", "EE.UU.", "EEUU",
    ),
    "FILIPINAS": ("PHL", "PHILIPPINES", "FILIPINO", "FILIPINA", "REPUBLIC OF THE PHILIPPINES"),
    "FINLANDIA": ("FIN", "FINLAND", "FINNISH", "FINLANDES", "FINLANDÉS", "FINLANDESA", "SUOMI"),
    "FRANCIA": (
        "FRA", "FRANCE", "FRENCH", "FRANCES", "FRANCÉS", "FRANCESA", "FRANCAIS",
        "FRANÇAIS", "FRENCH REPUBLIC", "REPUBLIQUE FRANCAISE", "RÉPUBLIQUE FRANÇAISE",
    ),
    "GRECIA": ("GRC", "GREECE", "GREEK", "GRIEGO", "GRIEGA", "HELLENIC REPUBLIC", "HELLAS"),
    "GUATEMALA": ("GTM", "GUATEMALAN", "GUATEMALTECO", "GUATEMALTECA"),
    "GUYANA": ("GUY", "GUYANESE", "GUYANES", "GUYANÉS"),
    "HAITI": ("HTI", "HAITÍ", "HAITIAN", "HAITIANO", "HAITIANA"),
    "HONDURAS": ("HND", "HONDURAN", "HONDUREÑO", "HONDUREÑA", "HONDURENO"),
    "HUNGRIA": ("HUN", "HUNGARY", "HUNGRÍA", "HUNGARIAN", "HUNGARO", "HÚNGARO", "MAGYARORSZAG"),
    "INDIA": ("IND", "INDIAN", "INDIO", "HINDU", "REPUBLIC OF INDIA", "BHARAT"),
    "INDONESIA": ("IDN", "INDONESIAN", "INDONESIO", "INDONESIA REPUBLIC", "REPUBLIC OF INDONESIA"),
    "IRLANDA": ("IRL", "IRELAND", "IRISH", "IRLANDES", "IRLANDÉS", "IRLANDESA", "EIRE", "ÉIRE"),
    "ISLANDIA": ("ISL", "ICELAND", "ICELANDIC", "ISLANDES", "ISLANDÉS", "ISLANDESA"),
    "ISRAEL": ("ISR", "ISRAELI", "ISRAELÍ", "STATE OF ISRAEL", "ESTADO DE ISRAEL"),
    "ITALIA": (
        "ITA", "ITALY", "ITALIAN", "ITALIANO", "ITALIANA", "ITALIAN REPUBLIC",
        "REPUBBLICA ITALIANA",
    ),
    "JAMAICA": ("JAM", "JAMAICAN", "JAMAICANO", "JAMAIQUINO"),
    "JAPON": ("JPN", "JAPAN", "JAPÓN", "JAPANESE", "JAPONES", "JAPONÉS", "JAPONESA", "NIPPON"),
    "JORDANIA": ("JOR", "JORDAN", "JORDANIAN", "JORDANO", "HASHEMITE KINGDOM OF JORDAN"),
    "KENYA": ("KEN", "KENIA", "KENYAN", "KENIANO", "KENIATA", "REPUBLIC OF KENYA"),
    "LIBANO": ("LBN", "LEBANON", "LÍBANO", "LEBANESE", "LIBANES", "LIBANÉS", "LIBANESA"),
    "LITUANIA": ("LTU", "LITHUANIA", "LITHUANIAN", "LITUANO", "LITUANA"),
    "LUXEMBURGO": ("LUX", "LUXEMBOURG", "LUXEMBOURGISH", "LUXEMBURGUES", "LUXEMBURGUÉS"),
    "MALASIA": ("MYS", "MALAYSIA", "MALAYSIAN", "MALASIO", "MALAYO"),
    "MARRUECOS": ("MAR", "MOROCCO", "MOROCCAN", "MARROQUI", "MARROQUÍ", "KINGDOM OF MOROCCO"),
    "MEXICO": (
        "MEX", "MÉXICO", "MEXICAN", "MEXICANO", "MEXICANA", "UNITED MEXICAN STATES",
        "ESTADOS UNIDOS MEXICANOS",
    ),
    "MONACO": ("MCO", "MÓNACO", "MONEGASQUE", "MONEGASCO", "PRINCIPALITY OF MONACO"),
    "NICARAGUA": ("NIC", "NICARAGUAN", "NICARAGÜENSE", "NICARAGUENSE"),
    "NORUEGA": ("NOR", "NORWAY", "NORWEGIAN", "NORUEGO", "NORUEGA REINO", "NORGE"),
    "NUEVA ZELANDA": ("NZL", "NEW ZEALAND", "NEW ZEALANDER", "NEOZELANDES", "NEOZELANDÉS"),
    "PAISES BAJOS": (
        "NLD", "NETHERLANDS", "THE NETHERLANDS", "HOLLAND", "HOLANDA", "DUTCH",
        "NEERLANDES", "NEERLANDÉS", "HOLANDES", "HOLANDÉS", "PAÍSES BAJOS", "NEDERLAND",
        "KINGDOM OF THE NETHERLANDS",
    ),
    "PANAMA": ("PAN", "PANAMÁ", "PANAMANIAN", "PANAMEÑO", "PANAMEÑA", "PANAMENO"),
    "PARAGUAY": ("PRY", "PARAGUAYAN", "PARAGUAYO", "PARAGUAYA"),
    "PERU": ("PER", "PERÚ", "PERUVIAN", "PERUANO", "PERUANA", "REPUBLICA DEL PERU"),
    "POLONIA": ("POL", "POLAND", "POLISH", "POLACO", "POLACA", "POLSKA"),
    "PORTUGAL": ("PRT", "PORTUGUESE", "PORTUGUES", "PORTUGUÉS", "PORTUGUESA", "PORTUGUESE REPUBLIC"),
    "PUERTO RICO": ("PRI", "PUERTO RICAN", "PUERTORRIQUEÑO", "PUERTORRIQUENO"),
    "INGLATERRA": (
        "GBR", "UK", "U.K.", "UNITED KINGDOM", "GREAT BRITAIN", "BRITAIN", "BRITISH",
        "ENGLAND", "ENGLISH", "INGLES", "INGLÉS", "INGLESA", "BRITANICO", "BRITÁNICO",
        "REINO UNIDO", "BRITISH CITIZEN",
        "UNITED KINGDOM OF GREAT BRITAIN AND NORTHERN IRELAND",
    ),
    "REPUBLICA CHECA": (
        "CZE", "CZECH REPUBLIC", "CZECHIA", "CZECH", "CHECO", "CHECA",
        "REPÚBLICA CHECA", "CHEQUIA",
    ),
    "REPUBLICA DOMINICANA": (
        "DOM", "DOMINICAN REPUBLIC", "DOMINICAN", "DOMINICANO", "DOMINICANA",
        "REPÚBLICA DOMINICANA",
    ),
    "RUMANIA": ("ROU", "ROMANIA", "RUMANÍA", "ROMANIAN", "RUMANO", "RUMANA", "RUMANIA"),
    "RUSIA": ("RUS", "RUSSIA", "RUSSIAN", "RUSO", "RUSA", "RUSSIAN FEDERATION", "FEDERACION DE RUSIA"),
    "SANTA SEDE": ("VAT", "HOLY SEE", "VATICAN", "VATICAN CITY", "VATICANO", "CIUDAD DEL VATICANO"),
    "SENEGAL": ("SEN", "SENEGALESE", "SENEGALES", "SENEGALÉS"),
    "SERBIA": ("SRB", "SERBIAN", "SERBIO", "SERBIA REPUBLIC", "REPUBLIC OF SERBIA"),
    "SINGAPUR": ("SGP", "SINGAPORE", "SINGAPOREAN", "SINGAPURENSE"),
    "SIRIA": ("SYR", "SYRIA", "SYRIAN", "SIRIO", "SYRIAN ARAB REPUBLIC"),
    "SUDAFRICA": ("ZAF", "SOUTH AFRICA", "SUDÁFRICA", "SOUTH AFRICAN", "SUDAFRICANO", "SUDAFRICANA"),
    "SUECIA": ("SWE", "SWEDEN", "SWEDISH", "SUECO", "SUECA", "SVERIGE"),
    "SUIZA": ("CHE", "SWITZERLAND", "SWISS", "SUIZO", "SWISS CONFEDERATION", "SCHWEIZ", "SUISSE"),
    "SURINAME": ("SUR", "SURINAM", "SURINAMESE", "SURINAMES", "SURINAMÉS"),
    "TAILANDIA": ("THA", "THAILAND", "THAI", "TAILANDES", "TAILANDÉS", "TAILANDESA"),
    "TAIWAN": ("TWN", "TAIWÁN", "TAIWANESE", "TAIWANES", "TAIWANÉS", "REPUBLIC OF CHINA (TAIWAN)"),
    "TURQUIA": ("TUR", "TURKEY", "TÜRKIYE", "TURKIYE", "TURQUÍA", "TURKISH", "TURCO", "TURCA"),
    "UCRANIA": ("UKR", "UKRAINE", "UKRAINIAN", "UCRANIANO", "UCRANIANA"),
    "URUGUAY": ("URY", "URUGUAYAN", "URUGUAYO", "URUGUAYA", "REPUBLICA ORIENTAL DEL URUGUAY"),
    "VENEZUELA": (
        "VEN", "VENEZUELAN", "VENEZOLANO", "VENEZOLANA",
        "BOLIVARIAN REPUBLIC OF VENEZUELA", "REPUBLICA BOLIVARIANA DE VENEZUELA",
    ),
    "VIETNAM": ("VNM", "VIET NAM", "VIETNAMESE", "VIETNAMITA", "SOCIALIST REPUBLIC OF VIET NAM"),
}

COUNTRY_SYNONYMS: dict[str, str] = {
    synonym: canonical
    for canonical, synonyms in _SYNONYMS.items()
    for synonym in synonyms
}


def standardize_country(country: str) -> str:
    """Map a raw country value onto its canonical Spanish name.

    Unmapped values come back uppercased and trimmed, never as an error.
    """
    upper = " ".join(country.split()).upper()
    if upper in COUNTRY_CODE_MAP:
        return upper
    return COUNTRY_SYNONYMS.get(upper, upper)


def get_country_code(country: str) -> int | str:
    """Numeric code for a canonical country name.

    Unknown names fail open: the name itself is returned.
    """
    return COUNTRY_CODE_MAP.get(country, country)
