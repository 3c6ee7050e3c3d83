"""
Centralized constants for the stmtsense engine.
"""

# ==============================================================================
# STAGE 1: SNIFFER CONFIGURATION
# ==============================================================================
# Priority order matters: earlier candidates win ties.
DELIMITER_CANDIDATES = [';', '\t', ',', '|']
DEFAULT_DELIMITER = ','

# How many non-blank lines to scan for the header
SNIFF_WINDOW_SIZE = 20

# How many data rows after the header to keep for preview/probing
SAMPLE_ROW_COUNT = 5

HEADER_KEYWORDS = [
    'data', 'date', 'descrição', 'description', 'débito', 'debit',
    'crédito', 'credit', 'amount', 'valor'
]

# ==============================================================================
# STAGE 2: COLUMN SUGGESTION CONFIGURATION
# ==============================================================================
# Field order is the matching priority.
KEYWORDS_DATE = ['data mov', 'date', 'fecha', 'data']
KEYWORDS_DESC = ['descri', 'merchant', 'description', 'nome', 'name']
KEYWORDS_DEBIT = ['débito', 'debito', 'debit', 'cargo']
KEYWORDS_CREDIT = ['crédito', 'credito', 'credit', 'abono']
KEYWORDS_AMOUNT = ['amount', 'valor', 'importe', 'montante']
KEYWORDS_CATEGORY = ['categ', 'category', 'tipo', 'type']

# Emitted for "column not found" at the wire boundary
NOT_FOUND_SENTINEL = -1

# ==============================================================================
# STAGE 3: DIALECT PROBE CONFIGURATION
# ==============================================================================
AMOUNT_CLEAN_REGEX = r'[^\d.,\-]'
DATE_SPLIT_REGEX = r'[/\-.]'

# Max digits after a lone separator for it to count as a decimal point
MAX_DECIMAL_DIGITS = 2

# Day-first is certain when the leading date token is in (12, 31]
MAX_MONTH = 12
MAX_DAY = 31

EUROPEAN_CURRENCY_MARKERS = ['€', 'EUR', 'R$', 'BRL']
US_CURRENCY_MARKER = '$'

# Semicolon exports skew European
SEMICOLON_EUROPEAN_BIAS = 2

NO_EVIDENCE_CONFIDENCE = 0.5

# Below this the user must confirm the dialect explicitly
LOW_CONFIDENCE_THRESHOLD = 0.7

# ==============================================================================
# STAGE 4: FINGERPRINT CONFIGURATION
# ==============================================================================
FINGERPRINT_SEPARATOR = '|'

# ==============================================================================
# WORKSPACE / RULE STORE
# ==============================================================================
WORKSPACE_HOME_ENV = "STMTSENSE_HOME"
WORKSPACE_DIRNAME = ".stmtsense_cache"
MAPPING_RULES_FILENAME = "mapping_rules.json"
