"""
Rank Relay - HTTP relay between spreadsheet rank data and an OpenAI assistant.

Fetches rank/company rows from a public spreadsheet CSV export and
lets a hosted assistant answer natural-language questions about them.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

__version__ = "1.0.0"
