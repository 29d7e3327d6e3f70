import os
from dotenv import load_dotenv

load_dotenv()

# Defaults the command-line host fills in when a flag is omitted
DEFAULT_KEY_TYPE = os.getenv("CSRBATCH_DEFAULT_KEY_TYPE", "RSA_2048")
DEFAULT_SIGN_HASH_ALG = os.getenv("CSRBATCH_DEFAULT_SIGN_HASH_ALG", "SHA256")  # SHA256|SHA384|SHA512|SHA1|MatchIssuer
DEFAULT_SUBJECT = os.getenv("CSRBATCH_DEFAULT_SUBJECT", "CN=[{CN}]")
DEFAULT_OUTPUT_PATH = os.getenv("CSRBATCH_OUTPUT_PATH", "output.csv")

# notAfter = notBefore + N * 365 days when not given explicitly
VALIDITY_YEARS = int(os.getenv("CSRBATCH_VALIDITY_YEARS", "10"))

# Append _YYYYMMDD_HHMMSS to the output file name so reruns never clobber earlier exports
TIMESTAMP_OUTPUT = os.getenv("CSRBATCH_TIMESTAMP_OUTPUT", "true").lower() == "true"

LOG_LEVEL = os.getenv("CSRBATCH_LOG_LEVEL", "INFO").upper()
