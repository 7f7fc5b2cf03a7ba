"""
Hotel Contracts ETL
Converts vendor hotel contract files into hotel_inventory / hotel_rates CSVs
"""

__version__ = '0.1.0'
