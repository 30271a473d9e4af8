EVENTS_URL = "/api/v1/events"
EVENT_URL = "/api/v1/events/{event_id}"
RECORD_VIEW_URL = "/api/v1/events/{event_id}/views"
SUBMIT_RESPONSE_URL = "/api/v1/events/{event_id}/responses"
EVENT_STATS_URL = "/api/v1/events/{event_id}/stats"
SUGGEST_TAGS_URL = "/api/v1/events/suggest-tags"
