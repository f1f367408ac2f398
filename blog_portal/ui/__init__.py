"""用户界面包 (MVVM: views + viewmodels)"""
