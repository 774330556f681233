import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")

# --- Filename Configuration ---
PRODUCTS_FILENAME = os.getenv("PRODUCTS_FILENAME", "products.csv")
INVOICES_FILENAME = os.getenv("INVOICES_FILENAME", "invoices.csv")
REPORT_FILENAME_PREFIX = os.getenv("REPORT_FILENAME_PREFIX", "Rapport_Stock_Avance_")
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")

# --- Export Webhook ---
EXPORT_WEBHOOK_URL = os.getenv("EXPORT_WEBHOOK_URL")
EXPORT_TIMEOUT = float(os.getenv("EXPORT_TIMEOUT", "15"))

# --- Report Identity ---
COMPANY_NAME = os.getenv("COMPANY_NAME", "")
CURRENCY = os.getenv("CURRENCY", "MAD")
DEFAULT_UNIT = os.getenv("DEFAULT_UNIT", "unité")

# --- Shared Business Logic ---
# Sentinel used by the product filter to select the whole catalog.
ALL_PRODUCTS = "all"
ALL_PRODUCTS_LABEL = "Tous les produits"

PERIODS = ["month", "quarter", "year"]

# Number of months shown in the stock evolution window (oldest first, ending this month).
STOCK_EVOLUTION_MONTHS = 6

# Colors are handed out by list position, never by value.
COLOR_PALETTE = [
    "#8B5CF6",
    "#06B6D4",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#EC4899",
    "#6366F1",
    "#84CC16",
    "#F97316",
    "#14B8A6",
]

# Abbreviated French month names, January first.
MONTH_LABELS = [
    "janv.",
    "févr.",
    "mars",
    "avr.",
    "mai",
    "juin",
    "juil.",
    "août",
    "sept.",
    "oct.",
    "nov.",
    "déc.",
]
