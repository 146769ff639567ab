"""
Run with: python -m aeroanalysis
"""
from aeroanalysis.main import main

if __name__ == "__main__":
    main()
