"""
Collection-related GraphQL queries and mutations.

This module contains the collection operations used by the order sync:
- Product collections with their manual ordering
- Collection reordering
"""

# =============================================
# COLLECTION QUERIES
# =============================================

# Custom collections of a product, with members in manual order and their order metafield
PRODUCT_COLLECTIONS_ORDER_QUERY = """
query GetProductCollectionsOrder($id: ID!, $collectionsFirst: Int!, $productsFirst: Int!) {
  product(id: $id) {
    id
    collections(first: $collectionsFirst, query: "collection_type:custom") {
      edges {
        node {
          id
          title
          products(first: $productsFirst, sortKey: MANUAL) {
            edges {
              node {
                id
                order: metafield(namespace: "custom", key: "product_order") {
                  value
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

# =============================================
# COLLECTION MUTATIONS
# =============================================

# Reorder products in collection (asynchronous job on Shopify's side)
COLLECTION_REORDER_PRODUCTS_MUTATION = """
mutation CollectionReorderProducts($id: ID!, $moves: [MoveInput!]!) {
  collectionReorderProducts(id: $id, moves: $moves) {
    job {
      id
      done
    }
    userErrors {
      field
      message
    }
  }
}
"""
