"""Constants for keyword import routes."""

DEFAULT_TEMPLATE_LOCALE = "en"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
TEMPLATE_FILENAME = "keyword-template-{suffix}.csv"
