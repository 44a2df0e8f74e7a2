from ptajournal.journal import Journal, Parser
from ptajournal.pricer import Pricer, BeforePriceAdd_t

def read_journal(database: str) -> tuple[Journal, list[str]]:
    p = Parser()
    with open(database, "r", encoding="utf-8") as database:
        for line in database:
            p.parse_line(line)
    journal = p.finish()
    return (journal, p.lines)

def read_prices(database: str,
                before_price_add: BeforePriceAdd_t | None = None) -> Pricer:
    with open(database, "r", encoding="utf-8") as database:
        return Pricer(database.read(), before_price_add)
