"""Geocoding providers."""

from delivery_pricing.geocoders.base import DEFAULT_USER_AGENT, Geocoder, HttpGeocoder
from delivery_pricing.geocoders.chain import GeocoderChain
from delivery_pricing.geocoders.nominatim import NOMINATIM_BASE_URL, NominatimGeocoder
from delivery_pricing.geocoders.photon import PHOTON_BASE_URL, PhotonGeocoder

__all__ = [
    "DEFAULT_USER_AGENT",
    "Geocoder",
    "GeocoderChain",
    "HttpGeocoder",
    "NOMINATIM_BASE_URL",
    "NominatimGeocoder",
    "PHOTON_BASE_URL",
    "PhotonGeocoder",
]
