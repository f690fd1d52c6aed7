"""Catalog of scraped event sources.

Selectors reflect each site's markup at the time it was added. Most sites run
on Drupal views, The Events Calendar (WordPress) or a custom card grid, so
shared chains are defined once and reused.
"""

from energy_events.sources.config import DC, ONLINE, SourceConfig

# Shared candidate chains
DRUPAL_VIEWS = [".views-row", ".view-content article", ".node--type-event"]
TRIBE_EVENTS = [
    ".tribe-events-calendar-list__event",
    ".tribe-events-list-event",
    "article.type-tribe_events",
    ".type-tribe_events",
]
EVENT_CARDS = [".event-card", ".event-item", "article.event", ".events-list li", ".event"]
GENERIC_SCAN = ["article", ".card", "li"]

# Shared date chains
DRUPAL_DATES = [
    ".date-display-single",
    ".field--name-field-date",
    ".field-date",
    ".event-date",
    ".date",
]
TRIBE_DATES = [
    ".tribe-event-date-start",
    ".tribe-events-calendar-list__event-datetime",
    ".tribe-events-schedule",
    "time",
]
CARD_DATES = [".event-date", ".date", ".card-date", "time"]

TRIBE_TITLES = [
    ".tribe-events-calendar-list__event-title a",
    ".tribe-events-list-event-title a",
    "h3 a",
    "h2 a",
]
TRIBE_LOCATIONS = [
    ".tribe-events-calendar-list__event-venue-title",
    ".tribe-venue",
    ".tribe-events-venue-details",
]
TRIBE_DESCRIPTIONS = [
    ".tribe-events-calendar-list__event-description",
    ".tribe-events-list-event-description",
    "p",
]

SOURCES: list[SourceConfig] = [
    # Regional climate and energy networks
    SourceConfig(
        slug="dmv-climate",
        host="DMV Climate Partners",
        base_url="https://dmvclimatepartners.org/events/",
        candidate_selectors=TRIBE_EVENTS + EVENT_CARDS,
        title_selectors=TRIBE_TITLES,
        date_selectors=TRIBE_DATES,
        location_selectors=TRIBE_LOCATIONS,
        description_selectors=TRIBE_DESCRIPTIONS,
    ),
    SourceConfig(
        slug="ase",
        host="Alliance to Save Energy",
        base_url="https://www.ase.org/events",
        candidate_selectors=DRUPAL_VIEWS,
        title_selectors=["h3", ".event-title", ".title", "h2", "h1"],
        date_selectors=[".event-date", ".date", ".event-time", ".field-date"],
    ),
    SourceConfig(
        slug="acore",
        host="American Council on Renewable Energy",
        base_url="https://acore.org/events/",
        candidate_selectors=TRIBE_EVENTS + EVENT_CARDS,
        title_selectors=TRIBE_TITLES,
        date_selectors=TRIBE_DATES,
        location_selectors=TRIBE_LOCATIONS,
        description_selectors=TRIBE_DESCRIPTIONS,
    ),
    SourceConfig(
        slug="c2es",
        host="Center for Climate and Energy Solutions",
        base_url="https://www.c2es.org/events/",
        candidate_selectors=[".event-listing", ".views-row", "article"],
        date_selectors=[".event-listing__date", ".date"],
        location_selectors=[".event-listing__location", ".location"],
        strict_dates=True,
    ),
    SourceConfig(
        slug="eesi",
        host="Environmental and Energy Study Institute",
        base_url="https://www.eesi.org/briefings",
        candidate_selectors=[".briefing", ".views-row", ".item-list li"],
        title_selectors=[".briefing-title a", "h3 a", "h2 a", "a"],
        date_selectors=[".briefing-date", ".date"],
        location_selectors=[".briefing-location", ".location"],
        category="Briefing",
    ),
    SourceConfig(
        slug="wri",
        host="World Resources Institute",
        base_url="https://www.wri.org/events",
        candidate_selectors=[".event-teaser", ".views-row", "article"],
        date_selectors=[".event-teaser__date", ".date", "time"],
        requires_relevance_filter=True,
    ),
    SourceConfig(
        slug="rff",
        host="Resources for the Future",
        base_url="https://www.resources.org/events/",
        candidate_selectors=[".event-item", ".card", "article"],
        date_selectors=[".event-item__date", ".card__date", ".date"],
        location_selectors=[".event-item__location"],
        strict_dates=True,
    ),
    SourceConfig(
        slug="csis-energy",
        host="CSIS Energy Security and Climate Change Program",
        base_url="https://www.csis.org/programs/energy-security-and-climate-change-program/events",
        link_base="https://www.csis.org",
        candidate_selectors=[".teaser--event", ".views-row", "article"],
        title_selectors=[".teaser__title a", "h3 a", "h2 a"],
        date_selectors=[".teaser__date", ".date"],
        description_selectors=[".teaser__text", "p"],
    ),
    SourceConfig(
        slug="atlantic-council-gec",
        host="Atlantic Council Global Energy Center",
        base_url="https://www.atlanticcouncil.org/programs/global-energy-center/events/",
        candidate_selectors=[".gta-site-banner--event", ".gta-embed--event", "article"],
        title_selectors=[".gta-embed--heading a", "h3 a", "h2 a"],
        date_selectors=[".gta-embed--date", ".date"],
        requires_relevance_filter=True,
        strict_dates=True,
    ),
    SourceConfig(
        slug="brookings",
        host="Brookings Institution",
        base_url="https://www.brookings.edu/events/",
        candidate_selectors=[".event-listing", "article.event", "article"],
        date_selectors=[".event-date", "time"],
        requires_relevance_filter=True,
        strict_dates=True,
    ),
    SourceConfig(
        slug="bpc",
        host="Bipartisan Policy Center",
        base_url="https://bipartisanpolicy.org/events/",
        candidate_selectors=[".event-card", ".card", "article"],
        date_selectors=[".event-card__date", ".card__date", ".date"],
        requires_relevance_filter=True,
    ),
    SourceConfig(
        slug="usea",
        host="United States Energy Association",
        base_url="https://usea.org/events",
        candidate_selectors=DRUPAL_VIEWS,
        date_selectors=DRUPAL_DATES,
    ),
    # Industry associations
    SourceConfig(
        slug="seia",
        host="Solar Energy Industries Association",
        base_url="https://seia.org/events/",
        candidate_selectors=EVENT_CARDS + GENERIC_SCAN,
        strict_dates=True,
        date_selectors=CARD_DATES,
        location_selectors=[".event-location", ".location"],
        default_location=ONLINE,
    ),
    SourceConfig(
        slug="acp",
        host="American Clean Power Association",
        base_url="https://cleanpower.org/events/",
        candidate_selectors=EVENT_CARDS,
        date_selectors=CARD_DATES,
        location_selectors=[".event-location", ".location"],
    ),
    SourceConfig(
        slug="eei",
        host="Edison Electric Institute",
        base_url="https://www.eei.org/en/events",
        candidate_selectors=[".event-list-item", ".event-card", ".card"],
        date_selectors=[".event-list-item__date", ".date"],
        location_selectors=[".event-list-item__location"],
    ),
    SourceConfig(
        slug="eba",
        host="Energy Bar Association",
        base_url="https://www.eba-net.org/events/",
        candidate_selectors=TRIBE_EVENTS + EVENT_CARDS,
        title_selectors=TRIBE_TITLES,
        date_selectors=TRIBE_DATES,
        location_selectors=TRIBE_LOCATIONS,
        description_selectors=TRIBE_DESCRIPTIONS,
    ),
    SourceConfig(
        slug="aceee",
        host="American Council for an Energy-Efficient Economy",
        base_url="https://www.aceee.org/events",
        candidate_selectors=DRUPAL_VIEWS,
        date_selectors=DRUPAL_DATES,
        location_selectors=[".field--name-field-location", ".location"],
    ),
    SourceConfig(
        slug="wcee",
        host="Women's Council on Energy and the Environment",
        base_url="https://www.wcee.org/events/",
        candidate_selectors=TRIBE_EVENTS + EVENT_CARDS,
        title_selectors=TRIBE_TITLES,
        date_selectors=TRIBE_DATES,
        location_selectors=TRIBE_LOCATIONS,
        description_selectors=TRIBE_DESCRIPTIONS,
    ),
    SourceConfig(
        slug="ype-dc",
        host="Young Professionals in Energy DC",
        base_url="https://www.ypenergy.org/dc/events",
        candidate_selectors=EVENT_CARDS + GENERIC_SCAN,
        date_selectors=CARD_DATES,
        strict_dates=True,
        category="Networking",
    ),
    SourceConfig(
        slug="nha-hydro",
        host="National Hydropower Association",
        base_url="https://www.hydro.org/events/",
        candidate_selectors=TRIBE_EVENTS + EVENT_CARDS,
        title_selectors=TRIBE_TITLES,
        date_selectors=TRIBE_DATES,
        location_selectors=TRIBE_LOCATIONS,
    ),
    SourceConfig(
        slug="nei",
        host="Nuclear Energy Institute",
        base_url="https://www.nei.org/events",
        candidate_selectors=[".event-listing-item", ".event-item", ".card"],
        date_selectors=[".event-date", ".date"],
        location_selectors=[".event-location"],
    ),
    # Federal agencies
    SourceConfig(
        slug="doe",
        host="U.S. Department of Energy",
        base_url="https://www.energy.gov/events",
        candidate_selectors=[".search-result", ".views-row", "article"],
        title_selectors=[".search-result-title a", "h3 a", "h2 a"],
        date_selectors=[".search-result-date", ".date", "time"],
        default_location=ONLINE,
    ),
    SourceConfig(
        slug="ferc",
        host="Federal Energy Regulatory Commission",
        base_url="https://www.ferc.gov/news-events/events",
        candidate_selectors=DRUPAL_VIEWS + ["table tbody tr"],
        title_selectors=[".views-field-title a", "td a", "h3 a"],
        date_selectors=[".views-field-field-date", "td time", ".date"],
        category="Meeting",
    ),
    SourceConfig(
        slug="eia",
        host="U.S. Energy Information Administration",
        base_url="https://www.eia.gov/pressroom/events/",
        candidate_selectors=[".events-list li", ".event", "li"],
        title_selectors=["a"],
        date_selectors=[".date", "span"],
        strict_dates=True,
    ),
    SourceConfig(
        slug="nrel",
        host="National Renewable Energy Laboratory",
        base_url="https://www.nrel.gov/news/events.html",
        candidate_selectors=[".event-listing", ".media", "li.event"],
        title_selectors=[".media-heading a", "h3 a", "a"],
        date_selectors=[".date", ".event-date"],
        default_location=ONLINE,
        category="Webinar",
    ),
    SourceConfig(
        slug="epa-climate",
        host="U.S. Environmental Protection Agency",
        base_url="https://www.epa.gov/climate-change/climate-change-events",
        candidate_selectors=DRUPAL_VIEWS + ["table tbody tr"],
        date_selectors=DRUPAL_DATES + ["td"],
        requires_relevance_filter=True,
        strict_dates=True,
        default_location=ONLINE,
    ),
    # District and regional government
    SourceConfig(
        slug="doee",
        host="DC Department of Energy and Environment",
        base_url="https://doee.dc.gov/events",
        candidate_selectors=DRUPAL_VIEWS,
        date_selectors=DRUPAL_DATES,
        location_selectors=[".field--name-field-location", ".location"],
    ),
    SourceConfig(
        slug="dcseu",
        host="DC Sustainable Energy Utility",
        base_url="https://www.dcseu.com/events",
        candidate_selectors=EVENT_CARDS + GENERIC_SCAN,
        date_selectors=CARD_DATES,
        strict_dates=True,
    ),
    SourceConfig(
        slug="mwcog",
        host="Metropolitan Washington Council of Governments",
        base_url="https://www.mwcog.org/events/",
        candidate_selectors=[".event-listing", ".event", "article"],
        date_selectors=[".event-date", ".date"],
        requires_relevance_filter=True,
        category="Meeting",
    ),
    # Universities
    SourceConfig(
        slug="gwu-sustainability",
        host="GW Sustainability",
        base_url="https://sustainability.gwu.edu/events",
        candidate_selectors=DRUPAL_VIEWS,
        date_selectors=DRUPAL_DATES,
        requires_relevance_filter=True,
    ),
    SourceConfig(
        slug="georgetown-climate",
        host="Georgetown Climate Center",
        base_url="https://www.georgetownclimate.org/events",
        candidate_selectors=[".event-list-item", ".event", "article"],
        date_selectors=[".event-date", ".date"],
    ),
    # Policy and advocacy
    SourceConfig(
        slug="cap",
        host="Center for American Progress",
        base_url="https://www.americanprogress.org/events/",
        candidate_selectors=[".card--event", ".card", "article"],
        date_selectors=[".card__date", ".date", "time"],
        requires_relevance_filter=True,
        strict_dates=True,
    ),
    SourceConfig(
        slug="itif",
        host="Information Technology and Innovation Foundation",
        base_url="https://itif.org/events/",
        candidate_selectors=[".event-item", ".card", "article"],
        date_selectors=[".event-item__date", ".date"],
        requires_relevance_filter=True,
        strict_dates=True,
    ),
    SourceConfig(
        slug="efi",
        host="Energy Futures Initiative",
        base_url="https://energyfuturesinitiative.org/events/",
        candidate_selectors=EVENT_CARDS + GENERIC_SCAN,
        date_selectors=CARD_DATES,
        strict_dates=True,
    ),
    SourceConfig(
        slug="clearpath",
        host="ClearPath",
        base_url="https://clearpath.org/events/",
        candidate_selectors=EVENT_CARDS + GENERIC_SCAN,
        date_selectors=CARD_DATES,
        strict_dates=True,
    ),
    SourceConfig(
        slug="wilson-center",
        host="Wilson Center",
        base_url="https://www.wilsoncenter.org/events",
        candidate_selectors=[".event-teaser", ".teaser", "article"],
        date_selectors=[".event-teaser-date", ".date", "time"],
        requires_relevance_filter=True,
        strict_dates=True,
    ),
    # Aggregators
    SourceConfig(
        slug="eventbrite",
        host="Eventbrite",
        base_url="https://www.eventbrite.com/d/dc--washington/energy/",
        candidate_selectors=['[data-testid="event-card"]', ".search-event-card-wrapper", "article"],
        title_selectors=["h3", "h2"],
        date_selectors=['[data-testid="event-date"]', ".event-card__date"],
        location_selectors=['[data-testid="event-location"]', ".card-text--truncated__one"],
        requires_relevance_filter=True,
        max_candidates=10,
    ),
    SourceConfig(
        slug="meetup",
        host="Meetup",
        base_url="https://www.meetup.com/find/?keywords=energy&location=us--dc--Washington",
        candidate_selectors=['[data-testid="event-card"]', '[data-testid="categoryResults-eventCard"]'],
        title_selectors=["h3", "h2"],
        date_selectors=['[data-testid="event-date"]', "time"],
        location_selectors=['[data-testid="event-location"]'],
        requires_relevance_filter=True,
        max_candidates=10,
        category="Networking",
    ),
]

SOURCES_BY_SLUG: dict[str, SourceConfig] = {source.slug: source for source in SOURCES}


def get_sources(slugs: list[str] | None = None, include_disabled: bool = False) -> list[SourceConfig]:
    """Sources in declaration order, optionally restricted to slugs."""
    selected = SOURCES
    if slugs:
        unknown = [slug for slug in slugs if slug not in SOURCES_BY_SLUG]
        if unknown:
            raise KeyError(f"Unknown source(s): {', '.join(unknown)}")
        wanted = set(slugs)
        selected = [source for source in SOURCES if source.slug in wanted]
    if not include_disabled:
        selected = [source for source in selected if source.enabled]
    return selected
