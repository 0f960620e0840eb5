import os
from dataclasses import dataclass, field, fields, replace
from typing import Optional

from dotenv import load_dotenv

from errors import ConfigError

# Сумма одного перевода: 0.000001 ETH в wei
AMOUNT_WEI = 10 ** 12
# Стандартный лимит газа для простого перевода
GAS_LIMIT = 21000
# Пауза между отправками, секунды
SLEEP_BETWEEN_TX = 2
CONNECT_TIMEOUT = 3
RECEIPT_TIMEOUT = 120
POLL_INTERVAL = 2

ADDRESS_FILE = "./ethereum-address/000000000003.csv"
EXPLORER_URL = "https://saturn-explorer.swanchain.io/tx/"

MESSAGE_CONTRACT = "0x0e32ed3f4696da578f8f3d32177a72a05188f903"
TOKEN_CONTRACT = "0xECd034b41CDF258a49634d61304635EEF1F45b74"


@dataclass(frozen=True)
class Config:
    private_key: str = field(repr=False)
    rpc_url: str
    proxy: Optional[str] = field(default=None, repr=False)
    amount_wei: int = AMOUNT_WEI
    gas_limit: int = GAS_LIMIT
    delay: float = SLEEP_BETWEEN_TX
    connect_timeout: float = CONNECT_TIMEOUT
    receipt_timeout: float = RECEIPT_TIMEOUT
    poll_interval: float = POLL_INTERVAL
    wait_for_receipt: bool = False
    address_file: str = ADDRESS_FILE
    explorer_url: str = EXPLORER_URL
    message_contract: str = MESSAGE_CONTRACT
    token_contract: str = TOKEN_CONTRACT

    def with_overrides(self, **overrides) -> "Config":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _env_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} должно быть числом, получено {raw!r}")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(env_file: Optional[str] = None, require_key: bool = True, **overrides) -> Config:
    """Build a Config from the process environment and an optional .env file.

    Values already present in the environment take precedence over the file.
    Keyword overrides (None values are ignored) take precedence over both.
    """
    if env_file is not None and not os.path.isfile(env_file):
        raise ConfigError(f"Не найден .env файл: {env_file}")
    load_dotenv(env_file)

    private_key = overrides.pop("private_key", None) or os.getenv("SENDER_PRIVATE_KEY")
    if require_key and not private_key:
        raise ConfigError("Не найден приватный ключ в .env файле (SENDER_PRIVATE_KEY)")

    rpc_url = overrides.pop("rpc_url", None) or os.getenv("RPC_URL")
    if not rpc_url:
        raise ConfigError("Не найден RPC в .env файле (RPC_URL)")

    config = Config(
        private_key=(private_key or "").strip(),
        rpc_url=rpc_url.strip(),
        proxy=os.getenv("PROXY") or None,
        amount_wei=_env_number("AMOUNT_WEI", int, AMOUNT_WEI),
        gas_limit=_env_number("GAS_LIMIT", int, GAS_LIMIT),
        delay=_env_number("SLEEP_BETWEEN_TX", float, SLEEP_BETWEEN_TX),
        connect_timeout=_env_number("CONNECT_TIMEOUT", float, CONNECT_TIMEOUT),
        receipt_timeout=_env_number("RECEIPT_TIMEOUT", float, RECEIPT_TIMEOUT),
        poll_interval=_env_number("POLL_INTERVAL", float, POLL_INTERVAL),
        wait_for_receipt=_env_flag("WAIT_FOR_RECEIPT", False),
        address_file=os.getenv("ADDRESS_FILE") or ADDRESS_FILE,
        explorer_url=os.getenv("EXPLORER_URL") or EXPLORER_URL,
        message_contract=os.getenv("MESSAGE_CONTRACT") or MESSAGE_CONTRACT,
        token_contract=os.getenv("TOKEN_CONTRACT") or TOKEN_CONTRACT,
    )

    unknown = set(overrides) - {f.name for f in fields(Config)}
    if unknown:
        raise ConfigError(f"Неизвестные параметры конфига: {', '.join(sorted(unknown))}")

    return config.with_overrides(**overrides)
