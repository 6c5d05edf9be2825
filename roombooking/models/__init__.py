"""Data models for the booking recorder."""

from .booking import Booking, BookingCandidate, StoredBooking
from .identity import HostIdentity

__all__ = ["Booking", "BookingCandidate", "HostIdentity", "StoredBooking"]
