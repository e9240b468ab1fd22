from datetime import date, timedelta

from congregate.models import Booking, Member, Room, User


class AnalyticsService:

    @staticmethod
    def get_stats(today=None):
        """Dashboard counters; ``week`` counts bookings dated in the last 7 days onwards."""
        today = today or date.today()
        last_week = today - timedelta(days=7)
        return {
            'rooms': Room.query.count(),
            'bookings': Booking.query.count(),
            'users': User.query.count(),
            'members': Member.query.count(),
            'week': Booking.query.filter(Booking.date >= last_week).count()
        }
