from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "dayplan_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "dayplan_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

TASKS_EXTRACTED_TOTAL = get_or_create_metric(
    "dayplan_tasks_extracted_total", "Total tasks extracted from prompts", Counter
)

TASK_OUTCOMES_TOTAL = get_or_create_metric(
    "dayplan_task_outcomes_total",
    "Per-task scheduling outcomes",
    Counter,
    labelnames=["result"],
)

EXTRACTION_FAILURES_TOTAL = get_or_create_metric(
    "dayplan_extraction_failures_total", "Submissions aborted by extraction errors", Counter
)
