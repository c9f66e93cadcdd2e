"""GraphQL documents for the Shopify Admin API order reads."""

MONEY_FIELDS = """
    shopMoney {
      amount
      currencyCode
    }
"""

MAILING_ADDRESS_FIELDS = """
    firstName
    lastName
    company
    address1
    address2
    city
    province
    country
    zip
    phone
    name
    provinceCode
    countryCode
    latitude
    longitude
"""

ORDER_FIELDS = f"""
    id
    legacyResourceId
    name
    email
    phone
    totalPriceSet {{ {MONEY_FIELDS} }}
    subtotalPriceSet {{ {MONEY_FIELDS} }}
    totalTaxSet {{ {MONEY_FIELDS} }}
    totalDiscountsSet {{ {MONEY_FIELDS} }}
    financialStatus: displayFinancialStatus
    fulfillmentStatus: displayFulfillmentStatus
    tags
    note
    processedAt
    createdAt
    updatedAt
    cancelledAt
    closedAt
    test
    customer {{
      id
      legacyResourceId
      email
      phone
      firstName
      lastName
      ordersCount: numberOfOrders
      totalSpentV2: amountSpent {{
        amount
        currencyCode
      }}
      tags
      note
      verifiedEmail
      taxExempt
      createdAt
      updatedAt
    }}
    lineItems(first: 250) {{
      edges {{
        node {{
          id
          product {{
            id
            legacyResourceId
          }}
          variant {{
            id
            legacyResourceId
          }}
          title
          variantTitle
          sku
          vendor
          quantity
          originalUnitPriceSet {{ {MONEY_FIELDS} }}
          totalDiscountSet {{ {MONEY_FIELDS} }}
          taxable
          requiresShipping
          fulfillmentService {{
            serviceName
          }}
          fulfillmentStatus
          weight {{
            value
            unit
          }}
        }}
      }}
    }}
    shippingAddress {{ {MAILING_ADDRESS_FIELDS} }}
    billingAddress {{ {MAILING_ADDRESS_FIELDS} }}
"""

# Newest orders first; the cursor of the last edge seeds the next page.
ORDERS_QUERY = f"""
query getOrders($first: Int!, $after: String) {{
  orders(first: $first, after: $after, sortKey: CREATED_AT, reverse: true) {{
    edges {{
      node {{ {ORDER_FIELDS} }}
      cursor
    }}
    pageInfo {{
      hasNextPage
      endCursor
    }}
  }}
}}
"""

ORDER_QUERY = f"""
query getOrder($id: ID!) {{
  order(id: $id) {{ {ORDER_FIELDS} }}
}}
"""
