from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import models  # noqa: F401  registers every table on Base.metadata
from app.db.base import Base
from app.db.session import engine
from app.errors import register_exception_handlers
from app.routes import account, auth, bill, card, category, chat, debt, investment, invoice, report, statement, transaction
from app.utils.logging import configure_logging

configure_logging()

app = FastAPI(title="Finance API")
Base.metadata.create_all(bind=engine)
register_exception_handlers(app)

app.include_router(auth.router, tags=["Auth"])
app.include_router(account.router, prefix="/account", tags=["Accounts"])
app.include_router(card.router, prefix="/card", tags=["Cards"])
app.include_router(category.router, prefix="/category", tags=["Categories"])
app.include_router(transaction.router, prefix="/transaction", tags=["Transactions"])
app.include_router(invoice.router, prefix="/invoice", tags=["Invoices"])
app.include_router(bill.router, prefix="/bill", tags=["Bills"])
app.include_router(debt.router, prefix="/debt", tags=["Debts"])
app.include_router(investment.router, prefix="/investment", tags=["Investments"])
app.include_router(chat.router, prefix="/chat", tags=["Chat"])
app.include_router(report.router, prefix="/report", tags=["Reports"])
app.include_router(statement.router, prefix="/statement", tags=["Statements"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "Finance API is running"}

@app.get("/healthz")
def healthz():
    return {"ok": True}
