"""Centralized constants for the futbolai routing and caching layer."""

# ---- Cache ----
# Bump when a cached payload changes shape; old entries simply stop matching.
CACHE_SCHEMA_VERSION = 3
CACHE_NAMESPACE = "futbolai"

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR

SQUAD_CACHE_TTL = 24 * HOUR  # rosters change seasonally
IMAGE_CACHE_TTL = 30 * DAY  # player photos almost never change
MATCHES_CACHE_TTL = 15 * MINUTE  # fixtures/results change hourly
FACT_CACHE_TTL = 24 * HOUR  # fun fact of the day, keyed by date
SEARCH_CACHE_TTL = 30 * MINUTE  # routed lookups (AI answers included)
PROXY_CACHE_TTL = 5 * MINUTE  # raw football-data passthrough
TRANSFERS_CACHE_TTL = 6 * HOUR  # transfer news moves slowly outside deadline day
# Translation tables are static; entries never expire.

# ---- Provider ids ----
PROVIDER_FOOTBALL_DATA = "football-data"
PROVIDER_THESPORTSDB = "thesportsdb"
PROVIDER_WIKIPEDIA = "wikipedia"
PROVIDER_WIKIDATA = "wikidata"
PROVIDER_GROQ = "groq-ai"
PROVIDER_STATIC = "static"
PROVIDER_CACHE = "cache"

# ---- Request pacing (seconds between consecutive calls to one provider) ----
DEFAULT_PACING_S = {
    PROVIDER_FOOTBALL_DATA: 0.15,
    PROVIDER_THESPORTSDB: 0.2,
    PROVIDER_WIKIPEDIA: 0.1,
    PROVIDER_WIKIDATA: 0.5,  # public SPARQL endpoint asks for restraint
    PROVIDER_GROQ: 2.0,  # free tier: ~30 req/min
    PROVIDER_STATIC: 0.0,
}

# ---- Timeouts / retries ----
PROVIDER_TIMEOUT_S = 5.0
TRANSIENT_RETRY_BACKOFF_S = 0.5

# ---- Upstream endpoints ----
FOOTBALL_DATA_BASE_URL = "https://api.football-data.org/v4"
THESPORTSDB_BASE_URL = "https://www.thesportsdb.com/api/v1/json"
THESPORTSDB_PUBLIC_KEY = "3"
WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary"
WIKIDATA_SPARQL_URL = "https://query.wikidata.org/sparql"
COMMONS_FILE_PATH_URL = "https://commons.wikimedia.org/wiki/Special:FilePath"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_DEFAULT_MODEL = "llama-3.1-8b-instant"
USER_AGENT = "FutbolAI/1.0"

# ---- Match windows (days) ----
RECENT_RESULTS_DAYS = 14
WEEKLY_WINDOW_DAYS = 7
DEFAULT_UPCOMING_DAYS = 30
DEFAULT_LATEST_LIMIT = 10
DEFAULT_TRANSFERS_LIMIT = 12
MATCHES_PER_COMPETITION = 50
# Uncached squads one player lookup may request; fits the router timeout at football-data pacing.
SQUAD_SCAN_MAX_FETCHES = 4

# ---- Telemetry estimates ----
# Rough prompt+completion tokens a single AI lookup would have cost.
ESTIMATED_TOKENS_PER_KIND = {
    "team": 2000,
    "player": 1500,
}
DEFAULT_ESTIMATED_TOKENS = 800
AI_COST_PER_MILLION_TOKENS_USD = 0.05

# ---- Flask development server ----
DEV_SERVER_HOST = "0.0.0.0"
DEV_SERVER_PORT = 5000
