import pytest


def make_card(
    name: str = "Café Linné",
    price: str = "95 kr",
    menu_html: str = "Fish soup<br>Salad bar",
    address: str = "ADRESS: Storgatan 1 TEL: 031-123456",
    href: str = "https://www.kvartersmenyn.se/rest/123",
) -> str:
    href_attr = f' href="{href}"' if href is not None else ""
    return f"""
    <div class="row t_lunch">
      <div class="name"><h5 class="t_lunch"><a{href_attr}>{name}</a></h5></div>
      <div class="price-rl"><span class="price">{price}</span></div>
      <div class="rest-menu"><p class="t_lunch">{menu_html}</p></div>
      <div class="divider"><p>{address}</p></div>
    </div>
    """


def make_page(*cards: str) -> str:
    return "<html><head><title>Lunch</title></head><body>" + "".join(cards) + "</body></html>"


@pytest.fixture()
def listing_page() -> str:
    return make_page(
        make_card(),
        make_card(name="   ", price="80 kr"),
        make_card(
            name="Pizzeria Napoli",
            price="110&nbsp;kr",
            menu_html="<b>Pizza</b> Margherita<br/>  <br>Ullevi-burgare med pommes",
            address="Kungsgatan 5",
            href=None,
        ),
    )
