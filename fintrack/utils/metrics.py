"""Prometheus metrics definitions"""

from prometheus_client import Counter, Histogram


# LLM cost & usage tracking
llm_tokens_counter = Counter(
    'fintrack_llm_tokens_used_total',
    'Total LLM tokens consumed',
    labelnames=['model_name', 'operation']
)

llm_cost_counter = Counter(
    'fintrack_llm_cost_dollars_total',
    'Total LLM cost in USD',
    labelnames=['model_name']
)

llm_api_latency = Histogram(
    'fintrack_llm_api_latency_seconds',
    'Latency of LLM API calls',
    labelnames=['model_name'],
    buckets=[0.5, 1, 2, 5, 10, 30]
)

llm_rate_limit_hits = Counter(
    'fintrack_llm_rate_limit_hits_total',
    'Number of LLM rate limit errors',
    labelnames=['model_name']
)

# Advisory outcomes
advisory_requests = Counter(
    'fintrack_advisory_requests_total',
    'Advisory gateway requests by outcome',
    labelnames=['operation', 'outcome']  # success, unavailable, invalid
)

tool_calls_executed = Counter(
    'fintrack_tool_calls_total',
    'Host-side tool calls executed on behalf of the model',
    labelnames=['tool_name', 'status']
)

stale_results_discarded = Counter(
    'fintrack_stale_results_discarded_total',
    'Advisory results dropped because their input was superseded',
    labelnames=['field']
)

# Ledger mutations
ledger_mutations = Counter(
    'fintrack_ledger_mutations_total',
    'Transaction and category mutations',
    labelnames=['entity', 'action']  # transaction/category, add/update/remove
)
