from court_rental.models.admin_user import AdminUser
from court_rental.models.court import Court
from court_rental.models.promo_code import PromoCode
from court_rental.models.booking import Booking

__all__ = ["AdminUser", "Court", "PromoCode", "Booking"]
