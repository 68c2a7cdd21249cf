"""Admin analytics API endpoints

Read-only reporting over the order store: an order summary with a status
breakdown, a per-day orders chart and a paginated order listing. Every
endpoint requires an authenticated caller with the admin role; the check is
a router-level dependency, so it runs before any report query.

All endpoints accept a ``dateRange`` token (today, 7days, anything else for
all time). Handlers delegate to service functions that hold the query and
aggregation logic."""
