"""
ATS detection - map a job URL or stored provider tag to an extraction strategy

Examples:
    https://boards.greenhouse.io/acme/jobs/123      -> greenhouse
    https://jobs.lever.co/acme/abc-123              -> lever
    https://acme.wd1.myworkdayjobs.com/Acme/job/... -> workday
    https://acme.gupy.io/jobs/456                   -> gupy
    https://careers.acme.com/jobs/789               -> unknown
"""

from job_ingest.models import AtsType

# Checked in order, first match wins
ATS_URL_FRAGMENTS: tuple[tuple[str, AtsType], ...] = (
    ("greenhouse", AtsType.GREENHOUSE),
    ("lever.co", AtsType.LEVER),
    ("workday", AtsType.WORKDAY),
    ("gupy", AtsType.GUPY),
)

_PROVIDER_TAGS = {ats.value: ats for ats in AtsType}


def detect_ats(url_or_provider: str | None) -> AtsType:
    """
    Classify a URL or provider identifier

    Args:
        url_or_provider: Job/career URL, or a stored provider tag such as "lever"

    Returns:
        Matching AtsType, AtsType.UNKNOWN when nothing matches
    """
    if not url_or_provider:
        return AtsType.UNKNOWN

    value = url_or_provider.strip().lower()

    if value in _PROVIDER_TAGS:
        return _PROVIDER_TAGS[value]

    for fragment, ats in ATS_URL_FRAGMENTS:
        if fragment in value:
            return ats

    return AtsType.UNKNOWN
