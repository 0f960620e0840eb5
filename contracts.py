import json
from datetime import datetime
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from utils.logger import logger
from web3_functions import checksum_address, load_account, masked_wallet, rpc_call, to_hex

MESSAGE_ABI = """[{"inputs":[],"name":"readMessage","outputs":[{"internalType":"string","name":"","type":"string"}],"stateMutability":"view","type":"function"},{"inputs":[{"internalType":"string","name":"newMessage","type":"string"}],"name":"writeMessage","outputs":[],"stateMutability":"nonpayable","type":"function"}]"""

TOKEN_ABI = """[{"inputs":[{"internalType":"address","name":"account","type":"address"}],"name":"balanceOf","outputs":[{"internalType":"uint256","name":"","type":"uint256"}],"stateMutability":"view","type":"function"},{"inputs":[],"name":"decimals","outputs":[{"internalType":"uint8","name":"","type":"uint8"}],"stateMutability":"view","type":"function"},{"inputs":[{"internalType":"address","name":"to","type":"address"},{"internalType":"uint256","name":"value","type":"uint256"}],"name":"transfer","outputs":[{"internalType":"bool","name":"","type":"bool"}],"stateMutability":"nonpayable","type":"function"},{"anonymous":false,"inputs":[{"indexed":true,"internalType":"address","name":"from","type":"address"},{"indexed":true,"internalType":"address","name":"to","type":"address"},{"indexed":false,"internalType":"uint256","name":"value","type":"uint256"}],"name":"Transfer","type":"event"}]"""

MESSAGE_PREFIX = "Hello, ether test update content at "


def timestamped_message(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return MESSAGE_PREFIX + now.strftime("%Y-%m-%d %H:%M:%S")


class Transactor:
    """Signs and submits contract transactions for one account on one chain."""

    def __init__(self, web3: Web3, account: LocalAccount, chain_id: int):
        self.web3 = web3
        self.account = account
        self.chain_id = chain_id
        self.wallet_masked = masked_wallet(account.address)

    @classmethod
    def from_web3(cls, web3: Web3, private_key: str) -> "Transactor":
        account = load_account(private_key)
        chain_id = rpc_call("Не удалось получить chain id", lambda: web3.eth.chain_id)
        return cls(web3, account, chain_id)

    def transact(self, contract_function) -> str:
        nonce = rpc_call("Не удалось получить nonce", self.web3.eth.get_transaction_count,
                         self.account.address, "pending")
        gas_price = rpc_call("Не удалось получить цену газа", lambda: self.web3.eth.gas_price)

        transaction = rpc_call(
            "Не удалось подготовить транзакцию контракта",
            contract_function.build_transaction,
            {
                "from": self.account.address,
                "nonce": nonce,
                "gasPrice": gas_price,
                "chainId": self.chain_id,
            },
        )
        signed_tx = Account.sign_transaction(transaction, self.account.key)
        tx_hash = rpc_call("Не удалось отправить транзакцию", self.web3.eth.send_raw_transaction,
                           signed_tx.raw_transaction)
        return to_hex(tx_hash)


class MessageStore:
    def __init__(self, web3: Web3, address: str):
        self.contract = web3.eth.contract(
            address=checksum_address(address),
            abi=json.loads(MESSAGE_ABI)
        )

    def write_message(self, transactor: Transactor, message: str) -> str:
        tx_id = transactor.transact(self.contract.functions.writeMessage(message))
        logger.info(f"[ {transactor.wallet_masked} ] | Сообщение записано! Tx Hash: {tx_id}")
        return tx_id

    def read_message(self) -> str:
        message = rpc_call("Не удалось прочитать сообщение", self.contract.functions.readMessage().call)
        logger.info(f"Прочитано сообщение: {message}")
        return message


class Token:
    def __init__(self, web3: Web3, address: str):
        self.contract = web3.eth.contract(
            address=checksum_address(address),
            abi=json.loads(TOKEN_ABI)
        )

    def transfer(self, transactor: Transactor, recipient: str, amount: int) -> str:
        call = self.contract.functions.transfer(checksum_address(recipient), amount)
        tx_id = transactor.transact(call)
        logger.info(f"[ {transactor.wallet_masked} ] | Перевод токена отправлен: {tx_id}")
        return tx_id

    def balance_of(self, address: str) -> int:
        return rpc_call("Не удалось получить баланс токена",
                        self.contract.functions.balanceOf(checksum_address(address)).call)
