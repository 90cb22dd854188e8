"""Turns a finished ResultAggregate into the serialized report.

Besides copying the counters, the report ranks sites and tags by how
"chatty" they are: the average number of words per question.
"""

from chatty.aggregate import ResultAggregate, SiteStats, TagStats
from chatty.models import ChattyReport, SiteSummary, TagSummary, Totals


# Sites and tags listed in each chatty ranking
CHATTY_MAX = 10


def rank_chatty(stats: dict[str, SiteStats] | dict[str, TagStats], limit: int = CHATTY_MAX) -> list[str]:
    """Names with the highest words-per-question coefficient.

    Ties are broken by name so the ranking does not depend on dict order.

    Args:
        stats: Name -> counters with a coef property
        limit: Maximum number of names to return

    Returns:
        Up to limit names, chattiest first
    """
    ranked = sorted(stats.items(), key=lambda item: (-item[1].coef, item[0]))
    return [name for name, _ in ranked[:limit]]


def _tag_summaries(tags: dict[str, TagStats]) -> dict[str, TagSummary]:
    return {name: TagSummary(questions=tags[name].questions, words=tags[name].words) for name in sorted(tags)}


def build_report(aggregate: ResultAggregate, chatty_max: int = CHATTY_MAX) -> ChattyReport:
    """Build the report for a completed run.

    Args:
        aggregate: Final aggregate returned by the scheduler
        chatty_max: Length of each chatty ranking

    Returns:
        ChattyReport ready to serialize
    """
    sites = {}
    for name in sorted(aggregate.sites):
        site = aggregate.sites[name]
        sites[name] = SiteSummary(
            questions=site.questions,
            words=site.words,
            tags=_tag_summaries(site.tags),
            chatty_tags=rank_chatty(site.tags, chatty_max),
        )

    totals = Totals(
        chatty_sites=rank_chatty(aggregate.sites, chatty_max),
        chatty_tags=rank_chatty(aggregate.tags, chatty_max),
        files=aggregate.files,
        questions=aggregate.questions,
        words=aggregate.words,
        failed_files=len(aggregate.failures),
    )

    return ChattyReport(
        sites=sites,
        tags=_tag_summaries(aggregate.tags),
        totals=totals,
        failures=dict(sorted(aggregate.failures.items())) if aggregate.failures else None,
    )
