"""Main entry point for the IQ-Fit solver (`python -m iqfit`)."""

from iqfit import main

if __name__ == "__main__":
    main()
