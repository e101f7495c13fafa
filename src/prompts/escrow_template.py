"""Base 0G-to-NFT escrow contract handed to the model as context."""

BASE_ESCROW_CONTRACT = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

import "@openzeppelin/contracts/token/ERC721/IERC721.sol";
import "@openzeppelin/contracts/token/ERC721/IERC721Receiver.sol";
import "@openzeppelin/contracts/utils/ReentrancyGuard.sol";

contract NFTEscrow is IERC721Receiver, ReentrancyGuard {
    enum State { Created, Funded, NFTDeposited, Completed, Cancelled }

    struct Order {
        address partyA;
        address partyB;
        address nftContract;
        uint256 tokenId;
        uint256 amount;
        bool ethDeposited;
        bool nftDeposited;
        State state;
    }

    uint256 public nextOrderId;
    mapping(uint256 => Order) public orders;

    event OrderCreated(uint256 indexed orderId, address indexed partyA, address indexed partyB);
    event ETHDeposited(uint256 indexed orderId, uint256 amount);
    event NFTDeposited(uint256 indexed orderId, uint256 tokenId);
    event OrderCompleted(uint256 indexed orderId);
    event OrderCancelled(uint256 indexed orderId);

    modifier onlyParties(uint256 orderId) {
        Order storage o = orders[orderId];
        require(msg.sender == o.partyA || msg.sender == o.partyB, "Not a party");
        _;
    }

    function createOrder(address partyB, address nftContract, uint256 tokenId, uint256 amount)
        external
        returns (uint256 orderId)
    {
        require(partyB != address(0), "Invalid party B");
        require(amount > 0, "Amount must be positive");
        orderId = nextOrderId++;
        orders[orderId] = Order(msg.sender, partyB, nftContract, tokenId, amount, false, false, State.Created);
        emit OrderCreated(orderId, msg.sender, partyB);
    }

    function depositETHByPartyA(uint256 orderId) external payable nonReentrant {
        Order storage o = orders[orderId];
        require(msg.sender == o.partyA, "Only party A");
        require(!o.ethDeposited, "Already deposited");
        require(msg.value == o.amount, "Wrong amount");
        o.ethDeposited = true;
        o.state = State.Funded;
        emit ETHDeposited(orderId, msg.value);
    }

    function depositNFTByPartyB(uint256 orderId) external nonReentrant {
        Order storage o = orders[orderId];
        require(msg.sender == o.partyB, "Only party B");
        require(!o.nftDeposited, "Already deposited");
        IERC721(o.nftContract).safeTransferFrom(msg.sender, address(this), o.tokenId);
        o.nftDeposited = true;
        o.state = State.NFTDeposited;
        emit NFTDeposited(orderId, o.tokenId);
    }

    function executeTransaction(uint256 orderId) external nonReentrant onlyParties(orderId) {
        Order storage o = orders[orderId];
        require(o.ethDeposited && o.nftDeposited, "Deposits incomplete");
        require(o.state != State.Completed && o.state != State.Cancelled, "Order closed");
        o.state = State.Completed;
        IERC721(o.nftContract).safeTransferFrom(address(this), o.partyA, o.tokenId);
        (bool ok, ) = payable(o.partyB).call{value: o.amount}("");
        require(ok, "Payment failed");
        emit OrderCompleted(orderId);
    }

    function cancelOrder(uint256 orderId) external nonReentrant onlyParties(orderId) {
        Order storage o = orders[orderId];
        require(o.state != State.Completed && o.state != State.Cancelled, "Order closed");
        o.state = State.Cancelled;
        if (o.nftDeposited) {
            IERC721(o.nftContract).safeTransferFrom(address(this), o.partyB, o.tokenId);
        }
        if (o.ethDeposited) {
            (bool ok, ) = payable(o.partyA).call{value: o.amount}("");
            require(ok, "Refund failed");
        }
        emit OrderCancelled(orderId);
    }

    function onERC721Received(address, address, uint256, bytes calldata) external pure override returns (bytes4) {
        return IERC721Receiver.onERC721Received.selector;
    }
}
"""
