"""Allow running as: python -m model_switch"""

from model_switch.cli import main

if __name__ == "__main__":
    main()
