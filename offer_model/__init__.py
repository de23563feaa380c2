from offer_model.engines.calculator import calculate_offers
from offer_model.firms.normalizer import normalize
from offer_model.models import AdvisorProfile, FirmDeal, FirmParameter, OfferResult
from offer_model.schema.columns import CanonicalFirm

__all__ = [
    'AdvisorProfile',
    'CanonicalFirm',
    'FirmDeal',
    'FirmParameter',
    'OfferResult',
    'calculate_offers',
    'normalize',
]
