"""
Centralized Constants - SINGLE SOURCE OF TRUTH

Unit conversion factors, DLD categorical values, area aliases and the
developer lookup tables live here and are imported elsewhere.

DO NOT duplicate these definitions in other files.

Reference: Dubai Land Department open data (transactions dataset)
- Areas are stored in square meters (procedure_area)
- Prices are stored in AED (actual_worth, meter_sale_price per m²)
"""

# =============================================================================
# UNIT CONVERSION
# =============================================================================

# 1 m² = 10.764 ft². Applied in both directions (m² -> ft² for display,
# ft² -> m² for caller-supplied size thresholds).
SQM_TO_SQFT = 10.764

# Decimal places for derived sqft fields
SQFT_DECIMALS = 2

# Flip-history size window: fractional fuzz applied around a unit's m² size
SIZE_TOLERANCE = 0.02


# =============================================================================
# DLD CATEGORICAL VALUES (as stored in the *_en columns)
# =============================================================================

TRANS_GROUP_SALES = "Sales"
TRANS_GROUP_MORTGAGE = "Mortgage"
TRANS_GROUP_GIFT = "Gift"

TRANS_GROUPS = [TRANS_GROUP_SALES, TRANS_GROUP_MORTGAGE, TRANS_GROUP_GIFT]

REG_TYPE_READY = "Ready"
REG_TYPE_OFF_PLAN = "Off-plan"

REG_TYPES = [REG_TYPE_READY, REG_TYPE_OFF_PLAN]

USAGE_RESIDENTIAL = "Residential"
USAGE_COMMERCIAL = "Commercial"

PROPERTY_USAGES = [USAGE_RESIDENTIAL, USAGE_COMMERCIAL]

PROPERTY_TYPES = ["Unit", "Villa", "Land", "Building"]

# Loose caller tokens accepted at the API boundary
REG_TYPE_ALIASES = {
    'ready': REG_TYPE_READY,
    'off-plan': REG_TYPE_OFF_PLAN,
    'off_plan': REG_TYPE_OFF_PLAN,
    'offplan': REG_TYPE_OFF_PLAN,
    'off plan': REG_TYPE_OFF_PLAN,
}

USAGE_ALIASES = {
    'residential': USAGE_RESIDENTIAL,
    'commercial': USAGE_COMMERCIAL,
}

TRANS_GROUP_ALIASES = {
    'sales': TRANS_GROUP_SALES,
    'sale': TRANS_GROUP_SALES,
    'mortgage': TRANS_GROUP_MORTGAGE,
    'mortgages': TRANS_GROUP_MORTGAGE,
    'gift': TRANS_GROUP_GIFT,
    'gifts': TRANS_GROUP_GIFT,
}


def normalize_reg_type(raw_value) -> str | None:
    """Map a loose registration-type token ('off_plan', 'READY') to its DLD value."""
    if raw_value is None:
        return None
    value = str(raw_value).strip()
    if not value:
        return None
    return REG_TYPE_ALIASES.get(value.lower(), value)


def normalize_usage(raw_value) -> str | None:
    if raw_value is None:
        return None
    value = str(raw_value).strip()
    if not value:
        return None
    return USAGE_ALIASES.get(value.lower(), value)


def normalize_trans_group(raw_value) -> str | None:
    if raw_value is None:
        return None
    value = str(raw_value).strip()
    if not value:
        return None
    return TRANS_GROUP_ALIASES.get(value.lower(), value)


# =============================================================================
# PAGINATION & SORTING
# =============================================================================

DEFAULT_LIMIT = 20
DEFAULT_SORT_BY = "instance_date"
DEFAULT_SORT_ORDER = "DESC"
SORT_ORDERS = ("ASC", "DESC")

# Caller-facing sort key -> store column. Anything else is rejected.
SORTABLE_COLUMNS = {
    'instance_date': 'instance_date',
    'actual_worth': 'actual_worth',
    'procedure_area': 'procedure_area',
    'meter_sale_price': 'meter_sale_price',
    'area_name': 'area_name_en',
    'building_name': 'building_name_en',
    'transaction_id': 'transaction_id',
}

# Aggregate limits
AREA_STATS_UNFILTERED_LIMIT = 50
BUILDING_STATS_LIMIT = 20
SEARCH_PER_KIND_LIMIT = 5
SEARCH_MIN_QUERY_LENGTH = 2


# =============================================================================
# AREA ALIASES (marketing / common name -> canonical DLD area name)
# =============================================================================
#
# Keys are normalized: lowercase, single spaces (dashes read as spaces).
# Canonical values are copied verbatim from the store, including DLD's own
# misspellings ('Jumeriah') and double spaces.

AREA_ALIASES = {
    # Emaar Beachfront is registered under Dubai Harbour
    'emaar beachfront': 'Dubai Harbour',
    'jvc': 'Jumeirah Village Circle',
    'jvt': 'Jumeirah Village Triangle',
    'jlt': 'Jumeirah Lakes Towers',
    'jbr': 'Jumeriah Beach Residence  - JBR',
    'downtown': 'DownTown Dubai',
    'dubai hills': 'Dubai Hills Estate',
    'damac hills': 'DAMAC HILLS',
    'damac hills 2': 'DAMAC HILLS 2',
    'sobha hartland': 'SOBHA HARTLAND',
    'town square': 'TOWN SQUARE',
    'mbr city': 'Meydan One Community',
}


# =============================================================================
# DEVELOPER LOOKUP (project / master project name -> developer)
# =============================================================================

DEVELOPER_LOOKUP = {
    # Emaar
    'DownTown Dubai': 'Emaar',
    'Downtown Dubai': 'Emaar',
    'Dubai Marina': 'Emaar',
    'Dubai Creek Harbour': 'Emaar',
    'Dubai Hills Estate': 'Emaar',
    'Arabian Ranches - 1': 'Emaar',
    'Arabian Ranches 2': 'Emaar',
    'Arabian Ranches 3': 'Emaar',
    'The Greens': 'Emaar',
    'Emirates Living': 'Emaar',
    'Emaar South': 'Emaar',
    'Emaar Beachfront': 'Emaar',
    'Dubai Harbour': 'Emaar',
    'The Valley': 'Emaar',

    # Nakheel
    'Palm Jumeirah': 'Nakheel',
    'Jumeirah Village Circle': 'Nakheel',
    'Jumeirah Village Triangle': 'Nakheel',
    'Jumeirah Islands': 'Nakheel',
    'Jumeirah Park': 'Nakheel',
    'Jumeirah Heights': 'Nakheel',
    'Discovery Gardens': 'Nakheel',
    'International City Phase 1': 'Nakheel',
    'The Gardens': 'Nakheel',
    'Al Furjan': 'Nakheel',
    'Jumeriah Beach Residence  - JBR': 'Nakheel',
    'JBR': 'Nakheel',

    # DAMAC
    'DAMAC HILLS': 'DAMAC',
    'DAMAC HILLS 2': 'DAMAC',
    'Damac Hills': 'DAMAC',
    'Damac Hills 2': 'DAMAC',
    'DAMAC Lagoons': 'DAMAC',
    'Akoya Oxygen': 'DAMAC',

    # Sobha
    'SOBHA HARTLAND': 'Sobha',
    'Sobha Hartland': 'Sobha',
    'Sobha Reserve': 'Sobha',

    # Meraas
    'City Walk': 'Meraas',
    'Bluewaters Island': 'Meraas',
    'La Mer': 'Meraas',
    'Port de La Mer': 'Meraas',

    # Dubai Properties / DMCC
    'Business Bay': 'Dubai Properties',
    'Mudon': 'Dubai Properties',
    'Jumeirah Lakes Towers': 'DMCC',

    'Azizi Riviera': 'Azizi',

    'MAG City': 'MAG',
    'MAG 5': 'MAG',

    # Danube
    'Lawnz': 'Danube',
    'Olivz': 'Danube',
    'Bayz': 'Danube',
    'Elitz': 'Danube',

    # Dubai South
    'Dubai South Residential District': 'Dubai South',
    'Dubai World Central': 'Dubai South',

    # Other master developers
    'Motor City': 'Union Properties',
    'Silicon Oasis': 'DSOA',
    'Dubai Land Residence Complex': 'Dubai Land',
    'Arjan': 'Dubai Land',
    'TOWN SQUARE': 'Nshama',
    'Town Square': 'Nshama',
    'Meydan One Community': 'Meydan',
    'International Media Production Zone': 'IMPZ',
    'Dubai Sports City': 'Dubai Sports City',

    'Binghatti Avenue': 'Binghatti',
    'Binghatti Stars': 'Binghatti',

    'Samana Golf Avenue': 'Samana',
    'Samana Hills': 'Samana',

    'Mohammed Bin Rashid AL Maktoum District 11': 'MBR City',
    'MBR City': 'MBR City',
}

# Ordered keyword fallback rules, first match wins. Keywords are matched
# case-insensitively as substrings; 'mag ' keeps its trailing space so that
# names like 'Imagine' do not match.
DEVELOPER_KEYWORD_RULES = [
    (('emaar', 'downtown', 'dubai hills', 'creek harbour'), 'Emaar'),
    (('damac',), 'DAMAC'),
    (('sobha',), 'Sobha'),
    (('nakheel', 'palm', 'jvc', 'jvt'), 'Nakheel'),
    (('meraas',), 'Meraas'),
    (('azizi',), 'Azizi'),
    (('danube',), 'Danube'),
    (('binghatti',), 'Binghatti'),
    (('samana',), 'Samana'),
    (('mag ',), 'MAG'),
    (('ellington',), 'Ellington'),
    (('select',), 'Select Group'),
    (('omniyat',), 'Omniyat'),
]

# Label rendered at the presentation boundary for an unresolved developer
UNKNOWN_DEVELOPER_LABEL = "unknown"
