"""
staffboard.services - Server Actions per Domain

- auth: sign-in, registration, profile and password management
- clients, work_locations, positions, workers: organization-scoped CRUD
- assignments: worker placement lifecycle with audit log
- reports: hours report and CSV export
- shared: pagination and query helpers

Every public action has the signature ``await action(ctx, payload)`` and
returns an ActionResult.
"""
