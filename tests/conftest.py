import os

# без файлового лога в тестах; должно стоять до импорта utils.logger
os.environ["LOG_DIR"] = ""

from unittest.mock import MagicMock, PropertyMock

import pytest
from eth_account import Account
from web3 import Web3

from config import MESSAGE_CONTRACT, Config
from utils.logger import logger

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SENDER_ADDRESS = Account.from_key(PRIVATE_KEY).address

CHAIN_ID = 2024
GAS_PRICE = 1_000_000_000
START_NONCE = 7

RECIPIENTS = [
    "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
    "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb",
    "0x96216849c49358B10257cb55b28eA603c874b05E",
]


@pytest.fixture
def config():
    return Config(private_key=PRIVATE_KEY, rpc_url="http://127.0.0.1:8545", delay=0, poll_interval=0,
                  receipt_timeout=5)


@pytest.fixture
def fake_web3():
    web3 = MagicMock()
    web3.eth.get_transaction_count.return_value = START_NONCE
    type(web3.eth).gas_price = PropertyMock(return_value=GAS_PRICE)
    type(web3.eth).chain_id = PropertyMock(return_value=CHAIN_ID)
    web3.eth.send_raw_transaction.side_effect = lambda raw: Web3.keccak(raw)
    web3.eth.get_transaction_receipt.return_value = {"status": 1, "blockNumber": 123}
    return web3


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def contract(fake_web3):
    contract = fake_web3.eth.contract.return_value

    def build_transaction(params):
        return {**params, "to": Web3.to_checksum_address(MESSAGE_CONTRACT), "data": "0xdeadbeef",
                "gas": 60000, "value": 0}

    contract.functions.writeMessage.return_value.build_transaction.side_effect = build_transaction
    contract.functions.transfer.return_value.build_transaction.side_effect = build_transaction
    return contract
