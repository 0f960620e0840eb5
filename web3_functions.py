import time
from typing import Any, Callable, Optional, Union

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import TransactionNotFound
from web3.middleware import ExtraDataToPOAMiddleware
from web3.types import TxReceipt

from config import CONNECT_TIMEOUT, POLL_INTERVAL, RECEIPT_TIMEOUT
from errors import (ConfirmationTimeout, ConnectivityError, DataError, EtherTestError, RpcError, SigningKeyError,
                    TransactionFailed)
from utils.logger import logger


def masked_wallet(address):
    if isinstance(address, str) and len(address) >= 10:
        return f"{address[:6]}...{address[-4:]}"
    return None


def to_hex(tx_hash: Union[str, bytes]) -> str:
    if isinstance(tx_hash, str):
        return tx_hash
    return HexBytes(tx_hash).to_0x_hex()


def load_account(private_key: str) -> LocalAccount:
    try:
        return Account.from_key(private_key)
    except Exception as e:
        # сам ключ в текст ошибки не попадает
        raise SigningKeyError(f"Не удалось разобрать приватный ключ ({type(e).__name__})") from None


def web3_connect(rpc_url: str, proxy: Optional[str] = None, timeout: float = CONNECT_TIMEOUT) -> Web3:
    """Dial the endpoint once and make sure it answers.

    Provider-level retries are disabled: a failed call surfaces immediately.
    """
    session = None
    if proxy is not None:
        session = requests.Session()
        session.proxies.update({
            "http": proxy,
            "https": proxy
        })

    provider = Web3.HTTPProvider(
        rpc_url,
        request_kwargs={"timeout": timeout},
        session=session,
        exception_retry_configuration=None,
    )
    web3 = Web3(provider)
    web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    if not web3.is_connected():
        raise ConnectivityError(f"Не удалось подключиться к RPC {rpc_url}")

    return web3


def checksum_address(address: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as e:
        raise DataError(f"Неверный адрес {address!r}: {e}") from e


def rpc_call(description: str, func: Callable[..., Any], *args, **kwargs) -> Any:
    try:
        return func(*args, **kwargs)
    except EtherTestError:
        raise
    except Exception as e:
        raise RpcError(f"{description}: {e}") from e


def check_transaction(web3: Web3, tx_hash, timeout: float = RECEIPT_TIMEOUT,
                      poll_interval: float = POLL_INTERVAL) -> TxReceipt:
    """Block until the transaction is mined and return its receipt.

    A missing receipt means "not mined yet"; any other RPC error is raised as RpcError.
    Raises TransactionFailed when the receipt status is not 1.
    """
    tx_id = to_hex(tx_hash)
    deadline = time.monotonic() + timeout

    while True:
        try:
            tx_receipt = web3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            tx_receipt = None
        except Exception as e:
            raise RpcError(f"Ошибка при проверке транзакции {tx_id}: {e}") from e

        if tx_receipt is not None:
            if tx_receipt['status'] != 1:
                logger.error(f"Транзакция {tx_id} Failed, блок {tx_receipt['blockNumber']}")
                raise TransactionFailed(tx_id, tx_receipt)
            logger.info(f"Транзакция {tx_id} успешно добыта, номер блока: {tx_receipt['blockNumber']}")
            return tx_receipt

        if time.monotonic() >= deadline:
            raise ConfirmationTimeout(tx_id, timeout)

        time.sleep(poll_interval)
