"""
Recommendation engine: converts a risk tier and concern areas into an
ordered list of human-readable recommendations.

Modules
-------
rules     : TIER_RECOMMENDATIONS / AREA_RECOMMENDATIONS / GENERAL_RECOMMENDATIONS
            rule tables: plain data, no logic.
generator : generate_recommendations(): pure function, no DB or I/O.
"""
