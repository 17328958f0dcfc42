"""
Shared Kernel

Base value objects, domain errors and infrastructure ports (clock, receipt
storage, API error mapping) shared by the resources, slots and bookings apps.
"""
