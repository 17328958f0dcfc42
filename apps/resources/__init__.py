"""Resources app package.

This app encapsulates the bookable units of a business (courts, rooms) and
the templates slot generation is driven by: the weekly open-hours schedule
and the time-boxed pricing rules that override a resource's base price.
"""
