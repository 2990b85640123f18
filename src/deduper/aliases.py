from deduper.core.models import DEFAULT_HEADER_RATIO, DEFAULT_SIZE_RATIO_THRESHOLD

WINDOW_HELP_TEXT = (
    "Base tail window: bytes hashed by the cheapest (tier 0) fingerprint.\n"
    "Each higher tier doubles it. Default: 10KB\n"
    "Example    : %(prog)s ~/Downloads --window 64KB\n"
)

HEADER_RATIO_HELP_TEXT = (
    "Leading fraction of a file that tier 1+ windows never reach into,\n"
    "so files sharing only a common header are not compared on it.\n"
    f"Accepts 0.1 or 10%%. Default: {DEFAULT_HEADER_RATIO}\n"
)

SIZE_RATIO_HELP_TEXT = (
    "Files whose smaller/larger size ratio is at or below this value\n"
    f"are never compared. Accepts 0.9 or 90%%. Default: {DEFAULT_SIZE_RATIO_THRESHOLD}\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find probable duplicates in Downloads folder
  %(prog)s ~/Downloads

  Scan several folders at once (nested or repeated folders are ignored)
  %(prog)s ~/Downloads ~/Pictures ~/Pictures/2024

  Only consider photos between 500KB and 10MB, skip the cache folder
  %(prog)s ~/Pictures -m 500KB -M 10MB -x .jpg .png -e ~/Pictures/.cache

  Hash larger tails and demand closer sizes, with statistics
  %(prog)s ~/Videos --window 1MB --size-ratio 0.99 --verbose

Groups are PROBABLE duplicates: files are compared by size and by hashes
of growing tail slices, never byte by byte. Nothing is deleted or modified.
"""
