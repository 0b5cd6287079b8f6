CAPACITY_URL = "/api/v1/rsvps/capacity"
QUOTE_URL = "/api/v1/rsvps/quote"
CREATE_RSVP_URL = "/api/v1/rsvps"
PAYMENT_INTENT_URL = "/api/v1/payments/intent"
STRIPE_WEBHOOK_URL = "/api/v1/webhooks/stripe"

ADMIN_RSVPS_URL = "/api/v1/admin/rsvps"
ADMIN_RSVP_URL = "/api/v1/admin/rsvps/{rsvp_id}"
ADMIN_REFUND_URL = "/api/v1/admin/rsvps/{rsvp_id}/refund"
