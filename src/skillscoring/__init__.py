"\"\"\"Skill submission scoring engine.\"\"\""

__version__ = "0.1.0"
