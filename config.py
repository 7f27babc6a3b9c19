"""Configuration settings for PubChem compound extraction."""

import os
from pathlib import Path

# API Configuration
PUBCHEM_VIEW_URL = os.getenv(
    'PUBCHEM_VIEW_URL',
    "https://pubchem.ncbi.nlm.nih.gov/rest/pug_view/data/compound/{cid}/JSON/?"
)
USER_AGENT = "PubChemExtractor/0.1 (Research Project)"
JSON_HEADERS = {'Content-Type': 'application/json; charset=UTF8'}
HTML_HEADERS = {'Content-Type': 'text/html; charset=UTF8'}

# Timeouts and retries
REQUEST_TIMEOUT = float(os.getenv('PUBCHEM_REQUEST_TIMEOUT', '30'))  # seconds per request
MAX_RETRIES = int(os.getenv('PUBCHEM_MAX_RETRIES', '3'))
RETRY_DELAY = 2.0  # seconds, multiplied by the attempt number

# Rate Limiting for related-record pages
RELATED_DELAY_MIN = float(os.getenv('PUBCHEM_RELATED_DELAY_MIN', '5'))
RELATED_DELAY_MAX = float(os.getenv('PUBCHEM_RELATED_DELAY_MAX', '8'))

# Batch Processing
MAX_WORKERS = 4  # parallel extractions, one per CID

# Logging
LOG_DIR = Path(os.getenv(
    'PUBCHEM_LOG_DIR',
    str(Path(os.path.expanduser("~")) / ".pubchem_extractor" / "logs")
))
LOG_LEVEL = os.getenv('PUBCHEM_LOG_LEVEL', "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_TO_FILE = os.getenv('PUBCHEM_LOG_TO_FILE', '').lower() in ('1', 'true', 'yes')

# Record layout
NAMES_AND_IDENTIFIERS = "Names and Identifiers"
MOLECULAR_FORMULA = "Molecular Formula"
COMPUTED_DESCRIPTORS = "Computed Descriptors"
RELATED_RECORDS = "Related Records"
PARENT_COMPOUND = "Parent Compound"
RELATED_COMPOUNDS = "Related Compounds"
SUBSTANCES = "Substances"

# Children of "Computed Descriptors" are read by position, not by heading
DESCRIPTOR_POSITIONS = {
    'iupac_name': 0,
    'inchi': 1,
    'inchi_key': 2,
    'canonical_smiles': 3,
    'isomeric_smiles': 4,
}

# Matches identifiers in related-record listing pages
LINK_UID_PATTERN = r'link_uid=(\d+)'
