import time
from typing import Dict, List, Optional, Sequence

from eth_account import Account
from eth_account.datastructures import SignedTransaction
from web3 import Web3

from config import Config
from errors import EtherTestError, RpcError
from utils.logger import logger
from web3_functions import (check_transaction, checksum_address, load_account, masked_wallet, rpc_call, to_hex,
							web3_connect)


class EthSender:
	"""Sequential native-currency transfers from a single account.

	The nonce is fetched once per run and then incremented locally, so an
	instance must not be shared between threads or run concurrently with any
	other sender using the same account.
	"""

	def __init__(self, config: Config, web3: Optional[Web3] = None):
		self.config = config
		self.account = load_account(config.private_key)
		self.wallet_masked = masked_wallet(self.account.address)
		if web3 is None:
			self.web3 = web3_connect(config.rpc_url, config.proxy, config.connect_timeout)
		else:
			self.web3 = web3

	@property
	def address(self) -> str:
		return self.account.address

	def get_nonce(self) -> int:
		return rpc_call("Не удалось получить nonce", self.web3.eth.get_transaction_count,
						self.account.address, "pending")

	def get_gas_price(self) -> int:
		return rpc_call("Не удалось получить цену газа", lambda: self.web3.eth.gas_price)

	def get_chain_id(self) -> int:
		return rpc_call("Не удалось получить chain id", lambda: self.web3.eth.chain_id)

	def build_transfer(self, nonce: int, recipient: str, amount: int, gas_price: int, chain_id: int) -> Dict:
		return {
			"nonce": nonce,
			"to": checksum_address(recipient),
			"value": amount,
			"gas": self.config.gas_limit,
			"gasPrice": gas_price,
			"data": b"",
			"chainId": chain_id,
		}

	def sign(self, transaction: Dict) -> SignedTransaction:
		# chainId в транзакции включает защиту от повтора EIP-155
		return Account.sign_transaction(transaction, self.account.key)

	def submit(self, signed_tx: SignedTransaction) -> str:
		tx_hash = self.web3.eth.send_raw_transaction(signed_tx.raw_transaction)
		return to_hex(tx_hash)

	def wait_mined(self, tx_hash):
		return check_transaction(self.web3, tx_hash, self.config.receipt_timeout, self.config.poll_interval)

	def send_to_addresses(self, addresses: Sequence[str], amount: Optional[int] = None) -> List[str]:
		"""Send ``amount`` wei to every address in order and return the transaction hashes.

		The first error aborts the run: later addresses are not attempted and
		transactions already submitted stay on chain.
		"""
		amount = self.config.amount_wei if amount is None else amount

		nonce = self.get_nonce()
		gas_price = self.get_gas_price()
		chain_id = self.get_chain_id()
		logger.info(f"[ {self.wallet_masked} ] | nonce: {nonce} | gasPrice: {gas_price} | chainId: {chain_id} | "
					f"получателей: {len(addresses)}")

		tx_hashes = []
		for index, recipient_address in enumerate(addresses, start=1):
			try:
				transaction = self.build_transfer(nonce, recipient_address, amount, gas_price, chain_id)
				signed_tx = self.sign(transaction)
				tx_id = self.submit(signed_tx)
			except Exception as e:
				logger.error(f"[ {self.wallet_masked} ] | {index}/{len(addresses)} | "
							 f"Запуск прерван, не удалось отправить транзакцию на {recipient_address}: {e}")
				if isinstance(e, EtherTestError):
					raise
				raise RpcError(f"Не удалось отправить транзакцию на {recipient_address}: {e}") from e

			logger.info(f"[ {self.wallet_masked} ] | {index}/{len(addresses)} | "
						f"Транзакция отправлена на {recipient_address}: {tx_id}")
			tx_hashes.append(tx_id)

			if self.config.wait_for_receipt:
				self.wait_mined(tx_id)

			nonce += 1
			time.sleep(self.config.delay)

		logger.success(f"[ {self.wallet_masked} ] | Отправлено транзакций: {len(tx_hashes)}")
		return tx_hashes

	def transfer(self, recipient_address: str, amount: Optional[int] = None, wait: bool = True):
		amount = self.config.amount_wei if amount is None else amount

		nonce = self.get_nonce()
		gas_price = self.get_gas_price()
		chain_id = self.get_chain_id()

		tx_id = rpc_call(
			f"Не удалось отправить транзакцию на {recipient_address}",
			lambda: self.submit(self.sign(self.build_transfer(nonce, recipient_address, amount, gas_price, chain_id)))
		)
		logger.info(f"[ {self.wallet_masked} ] | Транзакция отправлена: {self.config.explorer_url}{tx_id}")

		if not wait:
			return tx_id
		return self.wait_mined(tx_id)
