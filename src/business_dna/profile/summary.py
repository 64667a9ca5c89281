from business_dna.models import BehavioralProfile

GROWTH_NOTES = {
    "growing": "Customer activity is growing.",
    "declining": "Customer activity is declining and may need attention.",
    "stable": "Customer activity is stable.",
}


def generate_profile_summary(profile: BehavioralProfile) -> str:
    """One-paragraph natural-language summary of a behavioral profile."""
    category = profile.category or profile.primary_category
    parts = [f"{profile.name} is a {category} business"]

    if profile.total_records:
        parts[0] += (
            f" with an average rating of {profile.average_rating:.1f} "
            f"from {profile.total_records} customer reviews"
        )
    parts[0] += "."

    if profile.strengths:
        parts.append(f"Customers appreciate: {', '.join(profile.strengths[:3])}.")
    if profile.weaknesses:
        parts.append(f"Areas for improvement: {', '.join(profile.weaknesses[:2])}.")

    parts.append(f"Response rate is {profile.response_rate}%.")
    parts.append(GROWTH_NOTES[profile.growth_trend])
    return " ".join(parts)
