from congregate.models.user import User
from congregate.models.room import Room
from congregate.models.booking import Booking
from congregate.models.member import Member
from congregate.models.scale import Scale

__all__ = ['User', 'Room', 'Booking', 'Member', 'Scale']
