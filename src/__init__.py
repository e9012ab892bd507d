"""
Smart Finance - Source Package

An AI-assisted personal expense tracker: say, type or photograph what
you spent, and let Gemini turn it into structured records.

DESIGN PRINCIPLES:
1. AI proposes fields → schema validation decides
2. Fail early, fail visibly
3. No partial saves
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Smart Finance Team"
