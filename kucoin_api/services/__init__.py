# Endpoint services
from .account import AccountAndFunding
from .deposit import Deposits
from .market_data import MarketData
from .oco_orders import OcoOrders
from .orders import SpotOrders
from .stop_orders import StopOrders
from .sub_account import SubAccounts

__all__ = [
    "AccountAndFunding",
    "Deposits",
    "MarketData",
    "OcoOrders",
    "SpotOrders",
    "StopOrders",
    "SubAccounts",
]
