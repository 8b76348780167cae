from sqlalchemy import case

# critical > high > medium > low; unknown values sort last
LEVEL_RANKS = {"critical": 4, "high": 3, "medium": 2, "low": 1}


def level_rank(column):
    """SQL expression ranking a priority/severity column for ORDER BY."""
    return case(LEVEL_RANKS, value=column, else_=0)
