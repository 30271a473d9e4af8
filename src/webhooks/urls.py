LEMONSQUEEZY_WEBHOOK_URL = "/api/v1/webhooks/lemonsqueezy"
