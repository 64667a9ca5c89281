"""
Behavioral profile ("DNA") cache: build, staleness policy, single-flight and
scheduled refresh.
"""

from business_dna.profile.scheduler import ProfileRefreshScheduler
from business_dna.profile.service import ProfileService
from business_dna.profile.single_flight import SingleFlight
from business_dna.profile.summary import generate_profile_summary

__all__ = [
    "ProfileService",
    "ProfileRefreshScheduler",
    "SingleFlight",
    "generate_profile_summary",
]
