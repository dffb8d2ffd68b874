# tickets/models/__init__.py

"""
TICKETS MODELS PACKAGE EXPORTS
"""

from .catalog import Brand, DeviceModel, Fault
from .customer import Customer, CustomerDevice
from .service import Service, ServiceFault

__all__ = [
    "Brand",
    "DeviceModel",
    "Fault",
    "Customer",
    "CustomerDevice",
    "Service",
    "ServiceFault",
]
