import sys
from pathlib import Path

# Allow running from a source checkout without installing the package.
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

try:
    from typefont.cli import main
except ImportError as e:
    print("Error: Could not import the Typefont command line.")
    print("Please install the dependencies with `pip install -e .`.")
    print(f"Details: {e}")
    sys.exit(1)


if __name__ == '__main__':
    sys.exit(main())
