def business_matches(business, search_term="", industry=""):
    """
    True when ``search_term`` (case-insensitive) occurs in the business's
    name, description or industry, and ``industry`` is empty or equal to the
    business's industry.
    """
    term = (search_term or "").lower()
    haystacks = (business.name, business.description, business.industry)
    text_match = any(term in (value or "").lower() for value in haystacks)
    return text_match and (not industry or business.industry == industry)


def filter_businesses(businesses, search_term="", industry=""):
    """Directory filter. Pure: keeps input order and never touches the database."""
    return [business for business in businesses if business_matches(business, search_term, industry)]


def list_industries(businesses):
    """Distinct industries in first-seen order, for the industry dropdown."""
    seen = []
    for business in businesses:
        if business.industry and business.industry not in seen:
            seen.append(business.industry)
    return seen
