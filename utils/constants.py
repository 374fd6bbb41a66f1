APP_NAME = "Dompet"
APP_WIDTH = 1100
APP_HEIGHT = 700
DB_FILE = "dompet.db"
DEFAULT_USER_ID = "local"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

# Template kinds map one-to-one onto the ledger columns, except transfer
KIND_INCOME = "income"
KIND_OUTCOME = "outcome"
KIND_SAVING = "saving"
KIND_TRANSFER = "transfer"
TEMPLATE_KINDS = [KIND_INCOME, KIND_OUTCOME, KIND_SAVING, KIND_TRANSFER]
LEDGER_KINDS = [KIND_INCOME, KIND_OUTCOME, KIND_SAVING]

FREQUENCY_MONTHLY = "monthly"
FREQUENCY_WEEKLY = "weekly"
FREQUENCIES = [FREQUENCY_MONTHLY, FREQUENCY_WEEKLY]
WEEKLY_INTERVAL_DAYS = 7

AUTO_PREFIX = "[AUTO]"
UNKNOWN_WALLET_NAME = "Unknown"
TRANSFER_OUT_CATEGORY = "Transfer Keluar"
TRANSFER_IN_CATEGORY = "Transfer Masuk"
ADMIN_FEE_CATEGORY = "Others"

WALLET_TYPES = ["cash", "bank", "e-wallet", "savings"]
WALLET_TYPE_LABELS = {
    "cash": "Cash",
    "bank": "Bank",
    "e-wallet": "E-Wallet",
    "savings": "Savings",
}
DEFAULT_WALLET_NAME = "Dompet Utama"

CATEGORIES = {
    KIND_INCOME: ["Gaji", "Bonus", "Investasi", "Lainnya"],
    KIND_OUTCOME: [
        "Makan & Minum", "Transportasi", "Belanja", "Tagihan",
        "Hiburan", "Kesehatan", "Pendidikan", "Lainnya",
    ],
    KIND_SAVING: ["Tabungan Mandiri", "Dana Darurat", "Investasi Saham"],
    KIND_TRANSFER: ["Transfer Rutin", "Automated Savings", "E-Wallet Topup"],
}

# Spending categories a monthly limit can be set on; admin fees land in "Others"
BUDGET_CATEGORIES = CATEGORIES[KIND_OUTCOME] + [ADMIN_FEE_CATEGORY]

GOAL_COLORS = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899", "#14b8a6", "#f97316"]
DEFAULT_GOAL_COLOR = GOAL_COLORS[0]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOG_LEVEL = "INFO"
