import os
import sys

# handlers.* and common.* are imported from src, as they are inside the Lambda bundle
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
