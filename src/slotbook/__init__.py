"""Deployment slot booking service.

Teams reserve weekly deployment windows for their releases, track each
release through its lifecycle and manage the notification e-mail templates
used to announce bookings.
"""
