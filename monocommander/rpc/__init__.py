"""Clients for CometBFT RPC, Cosmos REST and EVM JSON-RPC, and endpoint resolution."""