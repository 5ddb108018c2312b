"""JSON-RPC configuration and management.

- Send ERC-4337 account abstraction methods to a bundler, see
  :py:mod:`eth_bundler.provider.bundler`

- Identification headers on every HTTP request, see
  :py:mod:`eth_bundler.provider.http`
"""
